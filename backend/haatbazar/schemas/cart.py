"""
haatbazar/schemas/cart.py - Pydantic models for Cart.

One cart document per user (document id = user id):
    {"user_id": "...", "products": [{"product_id": "...", "quantity": 2}, ...], "updated_at": ...}
`product_id` is unique inside `products`.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt


class CartLine(BaseModel):
    product_id: str = Field(..., description="ID of the product")
    quantity: int = Field(..., gt=0, description="Quantity of the product in the cart")


class CartOut(BaseModel):
    """Cart snapshot returned after a mutation."""
    user_id: str = Field(..., description="ID of the user who owns this cart")
    products: List[CartLine] = Field(default_factory=list)
    item_count: int = Field(0, description="Number of distinct product lines")
    updated_at: Optional[datetime] = None


class AddToCartBody(BaseModel):
    product_id: str = Field(..., min_length=1, alias="productId")
    # None -> 1; JSON true or "2" are rejected, range is checked by the service
    quantity: Optional[StrictInt] = None

    model_config = {"populate_by_name": True}


class UpdateQuantityBody(BaseModel):
    quantity: StrictInt


class CartDetailLine(BaseModel):
    product_id: str
    name: str
    price: float
    image: Optional[str] = None
    quantity: int
    subtotal: float


class CartDetailOut(BaseModel):
    """Full cart with product information, for the cart page."""
    user_id: str
    items: List[CartDetailLine] = Field(default_factory=list)
    item_count: int = 0
    total: float = 0.0
