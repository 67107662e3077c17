import requests
from sqlalchemy.exc import SQLAlchemyError

from paygate import db
from paygate.model import Order, PaymentStatus, PaymentTransaction
from paygate.vnpay import to_gateway_amount


class OrderStoreError(Exception):
    pass


class GatewayUnavailable(Exception):
    pass


# ===================== ORDERS =====================
def get_order_by_id(order_id):
    try:
        return db.session.get(Order, order_id)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise OrderStoreError(str(exc)) from exc


def get_transaction_by_ref(txn_ref):
    try:
        return PaymentTransaction.query.filter_by(txn_ref=txn_ref).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise OrderStoreError(str(exc)) from exc


def create_transaction(order_id, txn_ref, amount):
    transaction = PaymentTransaction(
        order_id=order_id,
        txn_ref=txn_ref,
        amount=amount,
        status=PaymentStatus.PENDING,
    )
    try:
        db.session.add(transaction)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise OrderStoreError(str(exc)) from exc
    return transaction


# ===================== IPN =====================
def amount_matches(order, transaction, raw_amount):
    if raw_amount is None:
        return False
    return (
        to_gateway_amount(order.total_amount) == raw_amount
        and to_gateway_amount(transaction.amount) == raw_amount
    )


def is_finalized(transaction, order):
    return (
        transaction.status != PaymentStatus.PENDING
        or order.payment_status == PaymentStatus.PAID
    )


def finalize_transaction(result):
    """Apply the gateway outcome to a pending transaction and its order.

    The transaction row is only updated while it is still PENDING, so a
    duplicate notification racing this one updates nothing. Returns False in
    that case.
    """
    status = PaymentStatus.PAID if result.is_success else PaymentStatus.FAILED
    try:
        updated = PaymentTransaction.query.filter_by(
            txn_ref=result.txn_ref, status=PaymentStatus.PENDING
        ).update(
            {
                "status": status,
                "response_code": result.response_code,
                "transaction_no": result.transaction_no,
                "bank_code": result.bank_code,
                "card_type": result.card_type,
                "pay_date": result.pay_date,
            },
            synchronize_session=False,
        )
        if not updated:
            db.session.rollback()
            return False

        transaction = PaymentTransaction.query.filter_by(txn_ref=result.txn_ref).one()
        order = db.session.get(Order, transaction.order_id)
        if status == PaymentStatus.PAID:
            order.payment_status = PaymentStatus.PAID
            order.payment_method = "VNPAY"
            order.vnpay_transaction_no = result.transaction_no
        elif order.payment_status != PaymentStatus.PAID:
            order.payment_status = PaymentStatus.FAILED
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise OrderStoreError(str(exc)) from exc
    return True


# ===================== QUERY API =====================
def query_transaction(api_url, payload, timeout):
    try:
        res = requests.post(api_url, json=payload, timeout=timeout)
        res.raise_for_status()
        return res.json()
    except (requests.RequestException, ValueError) as exc:
        raise GatewayUnavailable(str(exc)) from exc
