# haatbazar/repositories/transactions.py
from typing import Any, Dict, Optional

from haatbazar.core.clock import utcnow
from haatbazar.core.errors import DuplicateTransaction
from haatbazar.store import Document, DocumentStore

COL = "transactions"


class TransactionRepository:
    """transactions/{transaction_id}; the payment provider's id is the document id."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, transaction_id: str) -> Optional[Document]:
        return self.store.get(COL, transaction_id)

    def create(self, data: Dict[str, Any]) -> Document:
        """Recorded once; an id that already exists is a conflict, never an overwrite."""
        def mutate(current: Optional[Document]) -> Document:
            if current is not None:
                raise DuplicateTransaction()
            now = utcnow()
            return {**data, "status": "pending", "created_at": now, "updated_at": now}

        return self.store.update_one(COL, data["transaction_id"], mutate)

    def set_status(self, transaction_id: str, status: str) -> Optional[Document]:
        """Overwrite the status; returns the document as it was before the write."""
        previous: Dict[str, Any] = {}

        def mutate(current: Optional[Document]) -> Document:
            previous.clear()
            previous.update(current)
            current["status"] = status
            current["updated_at"] = utcnow()
            return current

        doc = self.store.update_one(COL, transaction_id, mutate, upsert=False)
        if doc is None:
            return None
        return {"before": previous, "after": doc}
