"""
haatbazar/repositories/carts.py - Cart aggregate store.

carts/{user_id}:
    {"user_id": ..., "products": [{"product_id": ..., "quantity": n}], "created_at": ..., "updated_at": ...}

Every mutation is one `store.update_one` call: the existence check for the product line
and the increment/insert happen inside the same atomic step, so two concurrent adds of the
same product can never both append a line. A commit conflict is retried a bounded number
of times and then surfaces as `InternalError`.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from haatbazar.core.clock import utcnow
from haatbazar.core.errors import CartLineNotFound, ConcurrentModification, InternalError, InvalidInput
from haatbazar.core.retry import conflict_retry
from haatbazar.store import Document, DocumentStore

COL = "carts"
LineCheck = Callable[[List[Dict[str, Any]]], None]

logger = logging.getLogger("haatbazar.cart")


def snapshot(user_id: str, doc: Optional[Document]) -> Dict[str, Any]:
    products = [
        {"product_id": line["product_id"], "quantity": int(line["quantity"])}
        for line in (doc or {}).get("products", [])
    ]
    return {
        "user_id": user_id,
        "products": products,
        "item_count": len(products),
        "updated_at": (doc or {}).get("updated_at"),
    }


class CartRepository:
    def __init__(self, store: DocumentStore, max_retries: int = 3):
        self.store = store
        self.max_retries = max_retries

    def _apply(self, user_id: str, mutate, upsert: bool = True) -> Optional[Document]:
        try:
            for attempt in conflict_retry(self.max_retries):
                with attempt:
                    return self.store.update_one(COL, user_id, mutate, upsert=upsert)
        except ConcurrentModification as exc:
            logger.error("Cart %s still conflicting after %d attempts", user_id, self.max_retries)
            raise InternalError("Cart update failed") from exc

    def get(self, user_id: str) -> Dict[str, Any]:
        return snapshot(user_id, self.store.get(COL, user_id))

    def add_or_increment(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        def mutate(current: Optional[Document]) -> Document:
            now = utcnow()
            doc = current or {"user_id": user_id, "products": [], "created_at": now}
            lines = doc.setdefault("products", [])
            for line in lines:
                if line.get("product_id") == product_id:
                    line["quantity"] = int(line.get("quantity", 0)) + quantity
                    break
            else:
                lines.append({"product_id": product_id, "quantity": quantity})
            doc["updated_at"] = now
            return doc

        doc = self._apply(user_id, mutate)
        logger.info("Cart %s: +%d x %s", user_id, quantity, product_id)
        return snapshot(user_id, doc)

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        def mutate(current: Optional[Document]) -> Document:
            for line in current.get("products", []):
                if line.get("product_id") == product_id:
                    line["quantity"] = quantity
                    break
            else:
                raise CartLineNotFound()
            current["updated_at"] = utcnow()
            return current

        doc = self._apply(user_id, mutate, upsert=False)
        if doc is None:
            raise CartLineNotFound()
        return snapshot(user_id, doc)

    def remove_line(self, user_id: str, product_id: str) -> Dict[str, Any]:
        def mutate(current: Optional[Document]) -> Document:
            lines = current.get("products", [])
            kept = [line for line in lines if line.get("product_id") != product_id]
            if len(kept) == len(lines):
                raise CartLineNotFound()
            current["products"] = kept
            current["updated_at"] = utcnow()
            return current

        doc = self._apply(user_id, mutate, upsert=False)
        if doc is None:
            raise CartLineNotFound()
        logger.info("Cart %s: removed %s", user_id, product_id)
        return snapshot(user_id, doc)

    def take_lines(self, user_id: str, check: Optional[LineCheck] = None) -> List[Dict[str, Any]]:
        """
        Empty the cart and hand back the lines it held, as one atomic step.

        `check` sees the lines before anything is written; raising from it leaves the cart
        untouched. Lines added concurrently either make it into the returned list or stay
        in the cart, never neither.
        """
        taken: List[Dict[str, Any]] = []

        def mutate(current: Optional[Document]) -> Document:
            lines = snapshot(user_id, current)["products"]
            if not lines:
                raise InvalidInput("Cart is empty")
            if check is not None:
                check(lines)
            taken[:] = lines
            current["products"] = []
            current["updated_at"] = utcnow()
            return current

        if self._apply(user_id, mutate, upsert=False) is None:
            raise InvalidInput("Cart is empty")
        logger.info("Cart %s: %d line(s) taken for checkout", user_id, len(taken))
        return taken

    def restore_lines(self, user_id: str, lines: List[Dict[str, Any]]) -> None:
        for line in lines:
            self.add_or_increment(user_id, line["product_id"], line["quantity"])

    def clear(self, user_id: str) -> bool:
        return self.store.delete(COL, user_id)
