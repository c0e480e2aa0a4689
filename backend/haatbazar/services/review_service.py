# haatbazar/services/review_service.py
import logging
from typing import Any, Dict, List

from haatbazar.core.errors import (
    InvalidRating,
    PermissionDenied,
    ProductNotFound,
    ReviewNotFound,
    unexpected_as_internal,
)
from haatbazar.repositories.products import ProductRepository
from haatbazar.repositories.reviews import ReviewRepository
from haatbazar.schemas.principal import Principal
from haatbazar.schemas.review import ReviewCreate

logger = logging.getLogger("haatbazar.reviews")


class ReviewService:
    def __init__(self, reviews: ReviewRepository, products: ProductRepository):
        self.reviews = reviews
        self.products = products

    def _refresh_product_rating(self, product_id: str) -> Dict[str, Any]:
        rating, count = self.reviews.rating_summary(product_id)
        if self.products.exists(product_id):
            self.products.update(product_id, {"rating": round(rating, 2), "num_reviews": count})
        return {"rating": round(rating, 2), "num_reviews": count}

    def add_review(self, principal: Principal, payload: ReviewCreate) -> Dict[str, Any]:
        if isinstance(payload.rating, bool) or not 1 <= payload.rating <= 5:
            raise InvalidRating()
        with unexpected_as_internal("add_review"):
            if not self.products.exists(payload.product_id):
                raise ProductNotFound()
            review = self.reviews.create({
                "product_id": payload.product_id,
                "user_id": principal.uid,
                "user_name": principal.display_name,
                "rating": payload.rating,
                "comment": payload.comment,
            })
            summary = self._refresh_product_rating(payload.product_id)
        return {"review": review, **summary}

    def get_product_reviews(self, product_id: str) -> List[Dict[str, Any]]:
        with unexpected_as_internal("get_product_reviews"):
            return self.reviews.list_for_product(product_id)

    def delete_review(self, principal: Principal, review_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("delete_review"):
            review = self.reviews.get(review_id)
            if not review:
                raise ReviewNotFound()
            if review.get("user_id") != principal.uid:
                raise PermissionDenied("You can only delete your own reviews")
            self.reviews.delete(review_id)
            summary = self._refresh_product_rating(review["product_id"])
        logger.info("Review %s deleted by %s", review_id, principal.uid)
        return {"review": None, **summary}
