"""
haatbazar/repositories/reviews.py

reviews/{product_id}__{user_id}: one review per user and product. The deterministic id
lets `create` check and insert in one atomic `update_one`.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from haatbazar.core.clock import utcnow
from haatbazar.core.errors import DuplicateReview
from haatbazar.store import Document, DocumentStore

COL = "reviews"

logger = logging.getLogger("haatbazar.reviews")


def review_id(product_id: str, user_id: str) -> str:
    return f"{product_id}__{user_id}"


class ReviewRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, rid: str) -> Optional[Document]:
        return self.store.get(COL, rid)

    def list_for_product(self, product_id: str) -> List[Document]:
        """Newest first."""
        return self.store.find(COL, [("product_id", "==", product_id)], order_by="created_at", descending=True)

    def create(self, data: Dict[str, Any]) -> Document:
        def mutate(current: Optional[Document]) -> Document:
            if current is not None:
                raise DuplicateReview()
            return {**data, "created_at": utcnow()}

        rid = review_id(data["product_id"], data["user_id"])
        doc = self.store.update_one(COL, rid, mutate)
        logger.info("Review %s added", rid)
        return doc

    def delete(self, rid: str) -> bool:
        return self.store.delete(COL, rid)

    def rating_summary(self, product_id: str) -> Tuple[float, int]:
        """(mean rating, count) over every review of the product; (0.0, 0) when none."""
        ratings = [int(r.get("rating", 0)) for r in self.store.find(COL, [("product_id", "==", product_id)])]
        if not ratings:
            return 0.0, 0
        return sum(ratings) / len(ratings), len(ratings)
