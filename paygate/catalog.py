# ===================== RESPONSE CODES =====================
RESPONSE_CODES = {
    "00": "Giao dịch thành công",
    "07": "Trừ tiền thành công. Giao dịch bị nghi ngờ (liên quan tới lừa đảo, giao dịch bất thường).",
    "09": "Giao dịch không thành công do: Thẻ/Tài khoản của khách hàng chưa đăng ký dịch vụ InternetBanking tại ngân hàng.",
    "10": "Giao dịch không thành công do: Khách hàng xác thực thông tin thẻ/tài khoản không đúng quá 3 lần",
    "11": "Giao dịch không thành công do: Đã hết hạn chờ thanh toán. Xin quý khách vui lòng thực hiện lại giao dịch.",
    "12": "Giao dịch không thành công do: Thẻ/Tài khoản của khách hàng bị khóa.",
    "13": "Giao dịch không thành công do Quý khách nhập sai mật khẩu xác thực giao dịch (OTP). Xin quý khách vui lòng thực hiện lại giao dịch.",
    "24": "Giao dịch không thành công do: Khách hàng hủy giao dịch",
    "51": "Giao dịch không thành công do: Tài khoản của quý khách không đủ số dư để thực hiện giao dịch.",
    "65": "Giao dịch không thành công do: Tài khoản của Quý khách đã vượt quá hạn mức giao dịch trong ngày.",
    "75": "Ngân hàng thanh toán đang bảo trì.",
    "79": "Giao dịch không thành công do: KH nhập sai mật khẩu thanh toán quá số lần quy định. Xin quý khách vui lòng thực hiện lại giao dịch",
    "99": "Các lỗi khác (lỗi còn lại, không có trong danh sách mã lỗi đã liệt kê)",
}

UNKNOWN_CODE_DESCRIPTION = "Lỗi không xác định"

SUCCESS_CODE = "00"


def describe(code):
    return RESPONSE_CODES.get(code, UNKNOWN_CODE_DESCRIPTION)


# ===================== IPN ACKNOWLEDGEMENTS =====================
# (RspCode, Message) pairs the gateway recognises; anything else is retried.
IPN_SUCCESS = ("00", "Confirm Success")
IPN_ORDER_NOT_FOUND = ("01", "Order not found")
IPN_ALREADY_CONFIRMED = ("02", "Order already confirmed")
IPN_INVALID_AMOUNT = ("04", "Invalid amount")
IPN_INVALID_SIGNATURE = ("97", "Invalid signature")
IPN_INVALID_REQUEST = ("99", "Invalid request")
IPN_UNKNOWN_ERROR = ("99", "Unknown error")


def ipn_ack(ack):
    code, message = ack
    return {"RspCode": code, "Message": message}


# ===================== BANKS =====================
BANKS = [
    {"code": "", "name": "Cổng thanh toán VNPAYQR"},
    {"code": "VNPAYQR", "name": "Thanh toán qua ứng dụng hỗ trợ VNPAYQR"},
    {"code": "VNBANK", "name": "Thanh toán qua ứng dụng ngân hàng nội địa"},
    {"code": "INTCARD", "name": "Thanh toán qua thẻ quốc tế"},
    {"code": "VIETQR", "name": "Thanh toán qua VietQR"},
    {"code": "NCB", "name": "Ngân hàng NCB"},
    {"code": "VIETCOMBANK", "name": "Ngân hàng Vietcombank"},
    {"code": "VIETINBANK", "name": "Ngân hàng VietinBank"},
    {"code": "BIDV", "name": "Ngân hàng BIDV"},
    {"code": "AGRIBANK", "name": "Ngân hàng Agribank"},
    {"code": "SACOMBANK", "name": "Ngân hàng SacomBank"},
    {"code": "TECHCOMBANK", "name": "Ngân hàng Techcombank"},
    {"code": "ACB", "name": "Ngân hàng ACB"},
    {"code": "VPBANK", "name": "Ngân hàng VPBank"},
    {"code": "TPBANK", "name": "Ngân hàng TPBank"},
    {"code": "MBBANK", "name": "Ngân hàng MBBank"},
    {"code": "SCB", "name": "Ngân hàng SCB"},
    {"code": "VIB", "name": "Ngân hàng VIB"},
    {"code": "SHB", "name": "Ngân hàng SHB"},
]
