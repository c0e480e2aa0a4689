# haatbazar/repositories/orders.py
import logging
from typing import Any, Dict, List, Optional

from haatbazar.core.clock import utcnow
from haatbazar.store import Document, DocumentStore

COL = "orders"

logger = logging.getLogger("haatbazar.orders")


class OrderRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def list_for_user(self, user_id: str) -> List[Document]:
        """Newest first (created_at DESC)."""
        return self.store.find(
            COL,
            [("user_id", "==", user_id)],
            order_by="created_at",
            descending=True,
        )

    def list_all(self) -> List[Document]:
        return self.store.find(COL, order_by="created_at", descending=True)

    def get(self, order_id: str) -> Optional[Document]:
        return self.store.get(COL, order_id)

    def create(self, data: Dict[str, Any]) -> Document:
        now = utcnow()
        doc = self.store.insert(COL, {**data, "created_at": now, "updated_at": now})
        logger.info("Order %s created for user %s", doc["id"], data.get("user_id"))
        return doc

    def update_status(self, order_id: str, status: str) -> Document:
        return self.store.set_fields(COL, order_id, {"status": status, "updated_at": utcnow()})

    def update_payment_status(self, order_id: str, status: str) -> Document:
        def mutate(current: Optional[Document]) -> Document:
            current.setdefault("payment_info", {})["status"] = status
            current["updated_at"] = utcnow()
            return current

        return self.store.update_one(COL, order_id, mutate, upsert=False)
