# haatbazar/repositories/products.py
import itertools
import logging
from typing import Any, Dict, Iterable, List, Optional

from haatbazar.core.clock import utcnow
from haatbazar.store import Document, DocumentStore

COL = "products"

logger = logging.getLogger("haatbazar.products")


def _matches_text(doc: Document, needle: str) -> bool:
    return needle in str(doc.get("name") or "").lower() or needle in str(doc.get("description") or "").lower()


class ProductRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, product_id: str) -> Optional[Document]:
        return self.store.get(COL, product_id)

    def exists(self, product_id: str) -> bool:
        return self.get(product_id) is not None

    def get_many(self, product_ids: Iterable[str]) -> Dict[str, Document]:
        out: Dict[str, Document] = {}
        for pid in dict.fromkeys(product_ids):
            doc = self.get(pid)
            if doc is not None:
                out[pid] = doc
        return out

    def list(self, category: Optional[str] = None) -> List[Document]:
        filters = [("category", "==", category)] if category else []
        return self.store.find(COL, filters, order_by="created_at", descending=True)

    def search(self, needle: str, limit: int) -> List[Document]:
        """Case-insensitive substring match on name or description, first `limit` hits."""
        needle = needle.lower()
        hits = (doc for doc in self.store.scan(COL) if _matches_text(doc, needle))
        return list(itertools.islice(hits, limit))

    def create(self, data: Dict[str, Any]) -> Document:
        payload = {**data, "rating": 0.0, "num_reviews": 0, "created_at": utcnow()}
        doc = self.store.insert(COL, payload)
        logger.info("Product %s created", doc["id"])
        return doc

    def update(self, product_id: str, fields: Dict[str, Any]) -> Document:
        return self.store.set_fields(COL, product_id, {**fields, "updated_at": utcnow()})

    def delete(self, product_id: str) -> bool:
        return self.store.delete(COL, product_id)
