# haatbazar/schemas/review.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class ReviewCreate(BaseModel):
    product_id: str = Field(..., min_length=1)
    rating: StrictInt
    comment: str = Field(..., min_length=1, max_length=1000)


class ReviewOut(BaseModel):
    id: str
    product_id: str
    user_id: str
    user_name: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    comment: str
    created_at: Optional[datetime] = None


class ReviewResult(BaseModel):
    review: Optional[ReviewOut] = None
    rating: float = 0.0
    num_reviews: int = 0
