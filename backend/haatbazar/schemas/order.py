# haatbazar/schemas/order.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["processing", "shipped", "delivered", "cancelled", "returned"]
PaymentStatus = Literal["pending", "paid", "refunded"]

ORDER_STATUSES = ("processing", "shipped", "delivered", "cancelled", "returned")
PAYMENT_STATUSES = ("pending", "paid", "refunded")


class OrderLine(BaseModel):
    product_id: str
    name: str = ""
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)


class PaymentInfo(BaseModel):
    transaction_uuid: str
    method: str
    status: PaymentStatus = "pending"


# (Input) checkout payload; items come from the user's cart
class OrderCreate(BaseModel):
    shipping_address: str = Field(..., min_length=1)
    billing_address: Optional[str] = None
    payment_method: Literal["esewa", "khalti", "cash"]
    transaction_uuid: Optional[str] = None
    shipping: float = Field(0.0, ge=0)


# (Output) order summary
class OrderOut(BaseModel):
    id: str
    user_id: str
    products: List[OrderLine] = Field(default_factory=list)
    total_amount: float
    shipping_address: str
    billing_address: str
    payment_info: PaymentInfo
    status: OrderStatus = "processing"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStatusBody(BaseModel):
    status: str


class PaymentStatusBody(BaseModel):
    status: str
