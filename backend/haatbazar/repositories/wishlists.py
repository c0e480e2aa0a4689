"""
haatbazar/repositories/wishlists.py - Wishlist documents.

wishlists/{user_id}: {"user_id": ..., "products": [{"product_id": ...}], "updated_at": ...}

Unlike the cart there is no quantity and the document shape does not forbid repeated
product ids; `add` simply skips the append when the product is already listed.
"""
from typing import Any, Dict, Optional

from haatbazar.core.clock import utcnow
from haatbazar.store import Document, DocumentStore

COL = "wishlists"


def snapshot(user_id: str, doc: Optional[Document]) -> Dict[str, Any]:
    products = [{"product_id": line["product_id"]} for line in (doc or {}).get("products", [])]
    return {"user_id": user_id, "products": products, "item_count": len(products)}


class WishListRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, user_id: str) -> Dict[str, Any]:
        return snapshot(user_id, self.store.get(COL, user_id))

    def add(self, user_id: str, product_id: str) -> Dict[str, Any]:
        def mutate(current: Optional[Document]) -> Document:
            doc = current or {"user_id": user_id, "products": []}
            lines = doc.setdefault("products", [])
            if not any(line.get("product_id") == product_id for line in lines):
                lines.append({"product_id": product_id})
            doc["updated_at"] = utcnow()
            return doc

        return snapshot(user_id, self.store.update_one(COL, user_id, mutate))

    def remove(self, user_id: str, product_id: str) -> Optional[Dict[str, Any]]:
        def mutate(current: Optional[Document]) -> Document:
            current["products"] = [
                line for line in current.get("products", []) if line.get("product_id") != product_id
            ]
            current["updated_at"] = utcnow()
            return current

        doc = self.store.update_one(COL, user_id, mutate, upsert=False)
        return snapshot(user_id, doc) if doc is not None else None
