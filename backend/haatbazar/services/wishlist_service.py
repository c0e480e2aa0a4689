# haatbazar/services/wishlist_service.py
from typing import Any, Dict

from haatbazar.core.errors import ProductNotFound, unexpected_as_internal
from haatbazar.repositories.products import ProductRepository
from haatbazar.repositories.wishlists import WishListRepository, snapshot


class WishListService:
    def __init__(self, wishlists: WishListRepository, products: ProductRepository, verify_products: bool = True):
        self.wishlists = wishlists
        self.products = products
        self.verify_products = verify_products

    def add(self, user_id: str, product_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("add_to_wishlist"):
            if self.verify_products and not self.products.exists(product_id):
                raise ProductNotFound()
            return self.wishlists.add(user_id, product_id)

    def get(self, user_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("get_wishlist"):
            return self.wishlists.get(user_id)

    def remove(self, user_id: str, product_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("remove_from_wishlist"):
            result = self.wishlists.remove(user_id, product_id)
        return result if result is not None else snapshot(user_id, None)
