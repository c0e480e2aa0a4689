# haatbazar/routers/reviews.py
from typing import List

from fastapi import APIRouter, Depends, status

from haatbazar.core.auth import get_principal, require_non_guest
from haatbazar.core.deps import get_review_service
from haatbazar.schemas.principal import Principal
from haatbazar.schemas.review import ReviewCreate, ReviewOut, ReviewResult
from haatbazar.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResult, status_code=status.HTTP_201_CREATED, summary="Review a product")
def add_review(
    payload: ReviewCreate,
    principal: Principal = Depends(require_non_guest),
    svc: ReviewService = Depends(get_review_service),
):
    return svc.add_review(principal, payload)


@router.get("/products/{product_id}", response_model=List[ReviewOut], summary="Product reviews (newest first)")
def list_product_reviews(product_id: str, svc: ReviewService = Depends(get_review_service)):
    return svc.get_product_reviews(product_id)


@router.delete("/{review_id}", response_model=ReviewResult, summary="Delete own review")
def delete_review(
    review_id: str,
    principal: Principal = Depends(get_principal),
    svc: ReviewService = Depends(get_review_service),
):
    return svc.delete_review(principal, review_id)
