"""
haatbazar/schemas/transaction.py - Payment transaction records.

Created when a payment is initiated (status=pending) and later overwritten by the payment
webhook. No transition graph is enforced: any status may replace any other.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

PaymentMethod = Literal["esewa", "khalti", "cash"]
TransactionStatus = Literal["pending", "completed", "failed", "refunded"]

TRANSACTION_STATUSES = ("pending", "completed", "failed", "refunded")
TERMINAL_STATUSES = ("completed", "failed", "refunded")


class TransactionCreate(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod


class TransactionStatusBody(BaseModel):
    status: str


class TransactionOut(BaseModel):
    id: str
    transaction_id: str
    order_id: str
    amount: float
    payment_method: PaymentMethod
    status: TransactionStatus = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
