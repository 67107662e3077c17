import math
import time
from decimal import InvalidOperation

from flask import Blueprint, current_app, jsonify, request

from paygate import catalog, dao
from paygate.model import PaymentStatus
from paygate.vnpay import PaymentRequest, sanitize_order_ref, to_gateway_amount

root_bp = Blueprint("root", __name__)
vnpay_bp = Blueprint("vnpay", __name__)
orders_bp = Blueprint("orders", __name__)


def get_client_ip(req):
    forwarded = req.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return req.remote_addr or "127.0.0.1"


def gateway():
    return current_app.extensions["vnpay"]


def bad_request(message, status=400):
    return jsonify({"success": False, "message": message}), status


@root_bp.route("/")
def index():
    return "Payment Gateway Server - VNPAY"


# ===================== VNPAY =====================
@vnpay_bp.route("/create-payment-url", methods=["POST"])
def create_payment_url():
    data = request.get_json(silent=True) or {}
    order_id = data.get("orderId")
    amount = data.get("amount")
    description = data.get("orderDescription")

    if not order_id:
        return bad_request("Order ID is required")
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or (isinstance(amount, float) and not math.isfinite(amount))
        or amount <= 0
    ):
        return bad_request("Invalid amount")
    try:
        gateway_amount = to_gateway_amount(amount)
    except InvalidOperation:
        return bad_request("Invalid amount")
    if not description:
        return bad_request("Order description is required")

    try:
        order = dao.get_order_by_id(str(order_id))
        if not order:
            return bad_request("Order not found", 404)
        if gateway_amount != to_gateway_amount(order.total_amount):
            return bad_request("Amount does not match order")

        # the gateway rejects a reference reused on the same day
        txn_ref = sanitize_order_ref(order_id) + str(int(time.time() * 1000))
        payment_url = gateway().build_payment_url(
            PaymentRequest(
                order_ref=txn_ref,
                amount=amount,
                description=description,
                ip_addr=get_client_ip(request),
                order_type=data.get("orderType") or "other",
                locale=data.get("locale") or "vn",
                bank_code=data.get("bankCode") or "",
            )
        )
        dao.create_transaction(order.id, txn_ref, amount)
    except dao.OrderStoreError:
        current_app.logger.exception("Could not create VNPAY payment for %s", order_id)
        return bad_request("Internal Server Error", 500)

    current_app.logger.info("VNPAY payment URL created for %s (ref %s)", order_id, txn_ref)
    return jsonify(
        {
            "success": True,
            "message": "Payment URL created successfully",
            "paymentUrl": payment_url,
            "orderId": txn_ref,
            "originalOrderId": order_id,
        }
    )


@vnpay_bp.route("/return")
def vnpay_return():
    result = gateway().verify_callback(request.args.to_dict())

    if not result.is_valid_signature:
        current_app.logger.warning("VNPAY return with invalid signature: %s", result.txn_ref)
        return bad_request("Invalid signature")

    if result.is_success:
        return jsonify({"success": True, "message": "Payment successful", "data": result.as_dict()})

    return (
        jsonify({"success": False, "message": "Payment failed", "data": result.as_dict()}),
        400,
    )


@vnpay_bp.route("/ipn")
def vnpay_ipn():
    params = request.args.to_dict()
    if not params:
        return jsonify(catalog.ipn_ack(catalog.IPN_INVALID_REQUEST))

    try:
        ack = process_ipn(params)
    except Exception:
        current_app.logger.exception("Error processing VNPAY IPN")
        ack = catalog.IPN_UNKNOWN_ERROR
    return jsonify(catalog.ipn_ack(ack))


def process_ipn(params):
    result = gateway().verify_callback(params)
    if not result.is_valid_signature:
        current_app.logger.warning("VNPAY IPN with invalid signature: %s", result.txn_ref)
        return catalog.IPN_INVALID_SIGNATURE

    transaction = dao.get_transaction_by_ref(result.txn_ref)
    order = dao.get_order_by_id(transaction.order_id) if transaction else None
    if not order:
        return catalog.IPN_ORDER_NOT_FOUND

    if dao.is_finalized(transaction, order):
        return catalog.IPN_ALREADY_CONFIRMED

    if not dao.amount_matches(order, transaction, result.raw_amount):
        current_app.logger.warning(
            "VNPAY IPN amount mismatch for %s: %s", result.txn_ref, result.raw_amount
        )
        return catalog.IPN_INVALID_AMOUNT

    if not dao.finalize_transaction(result):
        return catalog.IPN_ALREADY_CONFIRMED

    current_app.logger.info(
        "VNPAY IPN %s for order %s (code %s, transaction %s)",
        "paid" if result.is_success else "failed",
        order.id,
        result.response_code,
        result.transaction_no,
    )
    return catalog.IPN_SUCCESS


@vnpay_bp.route("/query-transaction", methods=["POST"])
def query_transaction():
    data = request.get_json(silent=True) or {}
    order_id = data.get("orderId")
    trans_date = data.get("transDate")
    if not order_id or not trans_date:
        return bad_request("Order ID and transaction date are required")

    vnp = gateway()
    if not vnp.credentials.api_url:
        return bad_request("VNPAY query API is not configured", 503)

    payload = vnp.build_query_payload(str(order_id), str(trans_date), get_client_ip(request))
    try:
        result = dao.query_transaction(
            vnp.credentials.api_url, payload, current_app.config["VNPAY_API_TIMEOUT"]
        )
    except dao.GatewayUnavailable:
        current_app.logger.exception("VNPAY query failed for %s", order_id)
        return bad_request("VNPAY query API unavailable", 502)

    return jsonify({"success": True, "data": result})


@vnpay_bp.route("/banks")
def banks():
    return jsonify({"success": True, "banks": catalog.BANKS})


# ===================== ORDERS =====================
@orders_bp.route("/<order_id>/payment-status")
def payment_status(order_id):
    try:
        order = dao.get_order_by_id(order_id)
    except dao.OrderStoreError:
        current_app.logger.exception("Error checking payment status for %s", order_id)
        return bad_request("Internal server error", 500)
    if not order:
        return bad_request("Order not found", 404)

    return jsonify(
        {
            "success": True,
            "isPaid": order.payment_status == PaymentStatus.PAID,
            "paymentStatus": order.payment_status.value.lower(),
            "paymentMethod": order.payment_method,
            "transactionNo": order.vnpay_transaction_no,
        }
    )


@orders_bp.route("/<order_id>")
def order_detail(order_id):
    try:
        order = dao.get_order_by_id(order_id)
    except dao.OrderStoreError:
        current_app.logger.exception("Error fetching order %s", order_id)
        return bad_request("Internal server error", 500)
    if not order:
        return bad_request("Order not found", 404)
    return jsonify({"success": True, "order": order.to_dict()})
