from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from paygate.config import GatewayCredentials, app_settings

db = SQLAlchemy()


def create_app(credentials=None, config=None):
    app = Flask(__name__)

    app.config.from_mapping(app_settings())
    if config:
        app.config.from_mapping(config)

    if credentials is None:
        credentials = GatewayCredentials.from_env()

    app.logger.setLevel(app.config["LOG_LEVEL"])

    from paygate.vnpay import Vnpay
    from paygate.index import orders_bp, root_bp, vnpay_bp

    app.extensions["vnpay"] = Vnpay(credentials)

    db.init_app(app)

    app.register_blueprint(root_bp)
    app.register_blueprint(vnpay_bp, url_prefix=app.config["VNPAY_URL_PREFIX"])
    app.register_blueprint(orders_bp, url_prefix="/orders")

    with app.app_context():
        from paygate import model  # noqa: F401

        db.create_all()

    return app
