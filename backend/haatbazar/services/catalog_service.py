"""
haatbazar/services/catalog_service.py - Product catalog and search.

Search is a plain case-insensitive substring match on name or description, capped at
`limit` results, in the store's natural order. A blank query returns [] without touching
the store.
"""
from typing import Any, Dict, List, Optional

from haatbazar.core.errors import NotFound, ProductNotFound, unexpected_as_internal
from haatbazar.repositories.products import ProductRepository
from haatbazar.schemas.product import ProductCreate, ProductUpdate, StockUpdate


class CatalogService:
    def __init__(self, products: ProductRepository, search_limit: int = 10):
        self.products = products
        self.search_limit = search_limit

    def search(self, query: Optional[str]) -> List[Dict[str, Any]]:
        needle = (query or "").strip()
        if not needle:
            return []
        with unexpected_as_internal("search"):
            return self.products.search(needle, self.search_limit)

    def list_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        with unexpected_as_internal("list_products"):
            return self.products.list(category)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("get_product"):
            doc = self.products.get(product_id)
        if not doc:
            raise ProductNotFound()
        return doc

    # ---------- admin ----------
    def create_product(self, payload: ProductCreate) -> Dict[str, Any]:
        with unexpected_as_internal("create_product"):
            return self.products.create(payload.model_dump())

    def update_product(self, product_id: str, payload: ProductUpdate) -> Dict[str, Any]:
        fields = payload.model_dump(exclude_none=True)
        with unexpected_as_internal("update_product"):
            try:
                if not fields:
                    return self.get_product(product_id)
                return self.products.update(product_id, fields)
            except NotFound as exc:
                raise ProductNotFound() from exc

    def delete_product(self, product_id: str) -> None:
        with unexpected_as_internal("delete_product"):
            if not self.products.delete(product_id):
                raise ProductNotFound()

    def update_stock(self, updates: List[StockUpdate]) -> Dict[str, Any]:
        """Bulk stock update; unknown ids are counted, not fatal."""
        updated, not_found = 0, 0
        with unexpected_as_internal("update_stock"):
            for item in updates:
                try:
                    self.products.update(item.id, {"count_in_stock": item.count_in_stock})
                    updated += 1
                except NotFound:
                    not_found += 1
        return {"updated": updated, "not_found": not_found}
