import pytest

from paygate import create_app, db
from paygate.config import GatewayCredentials
from paygate.model import Order, PaymentStatus, PaymentTransaction
from paygate.vnpay import Vnpay

SECRET = "TESTHASHSECRET0123456789ABCDEFGH"


@pytest.fixture()
def credentials():
    return GatewayCredentials(
        tmn_code="TESTTMN1",
        hash_secret=SECRET,
        payment_url="https://sandbox.example.vn/paymentv2/vpcpay.html",
        return_url="http://localhost:8000/vnpay/return",
        ipn_url="http://localhost:8000/vnpay/ipn",
        api_url="https://sandbox.example.vn/merchant_webapi/api/transaction",
    )


@pytest.fixture()
def vnp(credentials):
    return Vnpay(credentials)


@pytest.fixture()
def app(credentials):
    app = create_app(
        credentials,
        {"SQLALCHEMY_DATABASE_URI": "sqlite://", "TESTING": True},
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def order(app):
    with app.app_context():
        db.session.add(Order(id="ORD-1", total_amount=250000))
        db.session.add(
            PaymentTransaction(
                txn_ref="ORD11700000000000",
                order_id="ORD-1",
                amount=250000,
                status=PaymentStatus.PENDING,
            )
        )
        db.session.commit()
    return {"order_id": "ORD-1", "txn_ref": "ORD11700000000000"}


@pytest.fixture()
def callback(vnp):
    """Build a gateway callback signed with the test secret."""

    def _callback(txn_ref="ORD11700000000000", amount=25000000, code="00", **extra):
        params = {
            "vnp_Amount": str(amount),
            "vnp_BankCode": "NCB",
            "vnp_BankTranNo": "VNP14226112",
            "vnp_CardType": "ATM",
            "vnp_OrderInfo": "Thanh toan don hang",
            "vnp_PayDate": "20240102030405",
            "vnp_ResponseCode": code,
            "vnp_TmnCode": "TESTTMN1",
            "vnp_TransactionNo": "14226112",
            "vnp_TransactionStatus": code,
            "vnp_TxnRef": txn_ref,
        }
        params.update(extra)
        return {key: str(value) for key, value in vnp.sign_params(params).items()}

    return _callback
