"""
haatbazar/schemas/product.py - Pydantic models for catalog products.

| Field           | Type    | Notes |
|-----------------|---------|-------|
| name            | `str`   | required |
| description     | `str`   | required |
| price           | `float` | ≥0 |
| image           | `str`   | image URL |
| brand           | `str`   | optional |
| category        | `str`   | required |
| count_in_stock  | `int`   | ≥0 |
| rating          | `float` | mean review rating, maintained by reviews |
| num_reviews     | `int`   | maintained by reviews |
"""
from typing import Optional

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    image: str = Field("", description="Image URL")
    brand: Optional[str] = None
    category: str = Field(..., min_length=1)
    count_in_stock: int = Field(0, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    count_in_stock: Optional[int] = Field(None, ge=0)


class StockUpdate(BaseModel):
    id: str
    count_in_stock: int = Field(..., ge=0)


class ProductOut(ProductBase):
    id: str
    rating: float = 0.0
    num_reviews: int = 0


class ProductSummary(BaseModel):
    """Search result row."""
    id: str
    name: str
    description: str = ""
    price: float = 0.0
    image: str = ""
    category: str = ""
