# haatbazar/schemas/wishlist.py
from typing import List

from pydantic import BaseModel, Field


class WishListLine(BaseModel):
    product_id: str


class WishListOut(BaseModel):
    user_id: str
    products: List[WishListLine] = Field(default_factory=list)
    item_count: int = 0


class AddToWishListBody(BaseModel):
    product_id: str = Field(..., min_length=1, alias="productId")

    model_config = {"populate_by_name": True}
