from datetime import datetime
from enum import Enum as EnumClass

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from paygate import db


# ===================== ENUM =====================
class PaymentStatus(EnumClass):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


# ===================== ORDER =====================
class Order(db.Model):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    total_amount = Column(Float, nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_method = Column(String(50), nullable=True)
    vnpay_transaction_no = Column(String(50), nullable=True)
    created_date = Column(DateTime, default=datetime.now)

    transactions = relationship("PaymentTransaction", backref="order", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "total_amount": self.total_amount,
            "payment_status": self.payment_status.value.lower(),
            "payment_method": self.payment_method,
            "vnpay_transaction_no": self.vnpay_transaction_no,
            "created_date": self.created_date.isoformat() if self.created_date else None,
        }

    def __str__(self):
        return self.id


# ===================== PAYMENT TRANSACTION =====================
# One row per gateway attempt; txn_ref is the idempotency key for IPN delivery.
class PaymentTransaction(db.Model):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    txn_ref = Column(String(100), unique=True, nullable=False)
    order_id = Column(String(64), ForeignKey("orders.id"), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    response_code = Column(String(10), nullable=True)
    transaction_no = Column(String(50), nullable=True)
    bank_code = Column(String(50), nullable=True)
    card_type = Column(String(50), nullable=True)
    pay_date = Column(String(14), nullable=True)

    created_date = Column(DateTime, default=datetime.now)
    updated_date = Column(DateTime, default=datetime.now, onupdate=datetime.now)
