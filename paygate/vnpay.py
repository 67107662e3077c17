import hashlib
import hmac
import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from urllib.parse import quote

from paygate.catalog import SUCCESS_CODE, describe

VERSION = "2.1.0"
CURRENCY = "VND"
HASH_FIELD = "vnp_SecureHash"
HASH_TYPE_FIELD = "vnp_SecureHashType"
DATE_FORMAT = "%Y%m%d%H%M%S"

# characters encodeURIComponent leaves alone, besides alphanumerics and "-_."
_SAFE_CHARS = "!~*'()"


def _encode(value):
    return quote(str(value), safe=_SAFE_CHARS).replace("%20", "+")


def canonicalize(params):
    """Render a parameter set as the exact string the gateway signs.

    Empty values are dropped, keys and values are percent-encoded with
    spaces as ``+``, and pairs are sorted by encoded key. The result does not
    depend on the insertion order of ``params``.
    """
    encoded = [
        (_encode(key), _encode(value))
        for key, value in params.items()
        if value is not None and value != ""
    ]
    encoded.sort()
    return "&".join(f"{key}={value}" for key, value in encoded)


def sign(canonical, secret):
    return hmac.new(
        secret.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha512
    ).hexdigest()


def verify_signature(canonical, secret, candidate):
    if not candidate or not isinstance(candidate, str):
        return False
    expected = sign(canonical, secret)
    return hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8"))


def to_gateway_amount(amount):
    """Major currency units -> the gateway's hundredths, as an exact integer."""
    return int(
        (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )


def sanitize_order_ref(order_ref):
    return re.sub(r"[^a-zA-Z0-9]", "", str(order_ref))


def fold_description(description):
    decomposed = unicodedata.normalize("NFD", str(description))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    stripped = stripped.replace("đ", "d").replace("Đ", "D")
    return re.sub(r"[^a-zA-Z0-9\s]", "", stripped).strip()


@dataclass
class PaymentRequest:
    order_ref: str
    amount: object
    description: str
    ip_addr: str
    order_type: str = "other"
    locale: str = "vn"
    bank_code: str = ""


@dataclass(frozen=True)
class VerificationResult:
    is_valid_signature: bool
    txn_ref: str = None
    response_code: str = None
    amount: Decimal = None
    raw_amount: int = None
    bank_code: str = None
    card_type: str = None
    order_info: str = None
    pay_date: str = None
    transaction_no: str = None

    @property
    def is_success(self):
        return self.is_valid_signature and self.response_code == SUCCESS_CODE

    @property
    def description(self):
        return describe(self.response_code)

    def as_dict(self):
        amount = self.amount
        if amount is not None:
            amount = int(amount) if amount == amount.to_integral_value() else float(amount)
        return {
            "orderId": self.txn_ref,
            "amount": amount,
            "orderInfo": self.order_info,
            "responseCode": self.response_code,
            "transactionNo": self.transaction_no,
            "bankCode": self.bank_code,
            "cardType": self.card_type,
            "payDate": self.pay_date,
            "description": self.description,
        }


class Vnpay:
    def __init__(self, credentials):
        self.credentials = credentials

    def sign_params(self, params):
        """Return ``params`` in signing order with the secure hash appended."""
        filtered = {k: v for k, v in params.items() if v is not None and v != ""}
        signed = {key: filtered[key] for key in sorted(filtered, key=_encode)}
        signed[HASH_FIELD] = sign(canonicalize(filtered), self.credentials.hash_secret)
        return signed

    def _base_params(self, command, ip_addr, created_at):
        created_at = created_at or datetime.now()
        return {
            "vnp_Version": VERSION,
            "vnp_Command": command,
            "vnp_TmnCode": self.credentials.tmn_code,
            "vnp_IpAddr": ip_addr,
            "vnp_CreateDate": created_at.strftime(DATE_FORMAT),
        }

    def build_payment_url(self, request, created_at=None):
        params = self._base_params("pay", request.ip_addr, created_at)
        params.update(
            {
                "vnp_Locale": request.locale or "vn",
                "vnp_CurrCode": CURRENCY,
                "vnp_TxnRef": sanitize_order_ref(request.order_ref),
                "vnp_OrderInfo": fold_description(request.description),
                "vnp_OrderType": request.order_type or "other",
                "vnp_Amount": to_gateway_amount(request.amount),
                "vnp_ReturnUrl": self.credentials.return_url,
            }
        )
        if request.bank_code:
            params["vnp_BankCode"] = request.bank_code

        canonical = canonicalize(params)
        secure_hash = sign(canonical, self.credentials.hash_secret)
        return f"{self.credentials.payment_url}?{canonical}&{HASH_FIELD}={secure_hash}"

    def build_query_payload(self, order_ref, transaction_date, ip_addr, created_at=None):
        params = self._base_params("querydr", ip_addr, created_at)
        params.update(
            {
                "vnp_TxnRef": order_ref,
                "vnp_OrderInfo": f"Query transaction {order_ref}",
                "vnp_TransactionDate": transaction_date,
            }
        )
        return self.sign_params(params)

    def verify_callback(self, raw_params):
        response = dict(raw_params)
        secure_hash = response.pop(HASH_FIELD, None)
        response.pop(HASH_TYPE_FIELD, None)

        hash_data = canonicalize(response)
        is_valid = verify_signature(hash_data, self.credentials.hash_secret, secure_hash)

        raw_amount = None
        amount = None
        try:
            raw_amount = int(response.get("vnp_Amount"))
            amount = Decimal(raw_amount) / 100
        except (TypeError, ValueError):
            pass

        return VerificationResult(
            is_valid_signature=is_valid,
            txn_ref=response.get("vnp_TxnRef"),
            response_code=response.get("vnp_ResponseCode"),
            amount=amount,
            raw_amount=raw_amount,
            bank_code=response.get("vnp_BankCode"),
            card_type=response.get("vnp_CardType"),
            order_info=response.get("vnp_OrderInfo"),
            pay_date=response.get("vnp_PayDate"),
            transaction_no=response.get("vnp_TransactionNo"),
        )
