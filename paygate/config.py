import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True), override=False)

DEFAULT_DATABASE_URI = "mysql+pymysql://root@localhost/paygatedb?charset=utf8mb4"


class ConfigurationError(RuntimeError):
    pass


# ============== VNPAY CONFIG ==============
REQUIRED_VARS = {
    "tmn_code": "VNPAY_TMN_CODE",
    "hash_secret": "VNPAY_HASH_SECRET",
    "payment_url": "VNPAY_URL",
    "return_url": "VNPAY_RETURN_URL",
    "ipn_url": "VNPAY_IPN_URL",
}


@dataclass(frozen=True)
class GatewayCredentials:
    tmn_code: str
    hash_secret: str
    payment_url: str
    return_url: str
    ipn_url: str
    api_url: str = ""

    def __repr__(self):
        # keep the secret out of logs and tracebacks
        return (
            f"GatewayCredentials(tmn_code={self.tmn_code!r}, "
            f"payment_url={self.payment_url!r}, return_url={self.return_url!r}, "
            f"ipn_url={self.ipn_url!r}, api_url={self.api_url!r})"
        )

    @classmethod
    def from_env(cls, environ=None):
        """Read the gateway credentials, failing fast when a required value is absent.

        There is no fallback to sandbox credentials: a deployment without a
        configured secret must not start.
        """
        environ = os.environ if environ is None else environ
        values = {}
        missing = []
        for field, var in REQUIRED_VARS.items():
            value = (environ.get(var) or "").strip()
            if not value:
                missing.append(var)
            values[field] = value

        if missing:
            raise ConfigurationError(
                "Missing VNPAY configuration: " + ", ".join(missing)
            )

        values["api_url"] = (environ.get("VNPAY_API_URL") or "").strip()
        return cls(**values)


def app_settings(environ=None):
    environ = os.environ if environ is None else environ
    return {
        "SQLALCHEMY_DATABASE_URI": environ.get("DATABASE_URL", DEFAULT_DATABASE_URI),
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "VNPAY_URL_PREFIX": environ.get("VNPAY_URL_PREFIX", "/vnpay"),
        "VNPAY_API_TIMEOUT": float(environ.get("VNPAY_API_TIMEOUT", "10")),
        "LOG_LEVEL": environ.get("LOG_LEVEL", "INFO").upper(),
    }
