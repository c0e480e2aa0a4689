"""
haatbazar/services/cart_service.py

Request-facing cart operations. The user id comes from the authenticated Principal; this
layer validates the request shape, optionally checks that the product exists, and hands
the mutation to the cart aggregate store.
"""
import logging
from typing import Any, Dict, Optional

from haatbazar.core.errors import InvalidQuantity, ProductNotFound, unexpected_as_internal
from haatbazar.repositories.carts import CartRepository
from haatbazar.repositories.products import ProductRepository

logger = logging.getLogger("haatbazar.cart")


def validate_quantity(quantity: Optional[int], default: Optional[int] = 1) -> int:
    """Absent quantity falls back to `default`; anything else must be an int > 0."""
    if quantity is None and default is not None:
        return default
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity()
    return quantity


class CartService:
    def __init__(self, carts: CartRepository, products: ProductRepository, verify_products: bool = True):
        self.carts = carts
        self.products = products
        self.verify_products = verify_products

    def _check_product(self, product_id: str) -> None:
        if self.verify_products and not self.products.exists(product_id):
            raise ProductNotFound()

    # ---------- commands ----------
    def add_to_cart(self, user_id: str, product_id: str, quantity: Optional[int] = None) -> Dict[str, Any]:
        quantity = validate_quantity(quantity)
        with unexpected_as_internal("add_to_cart"):
            self._check_product(product_id)
            return self.carts.add_or_increment(user_id, product_id, quantity)

    def update_quantity(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        quantity = validate_quantity(quantity, default=None)
        with unexpected_as_internal("update_quantity"):
            return self.carts.set_quantity(user_id, product_id, quantity)

    def remove_from_cart(self, user_id: str, product_id: str) -> Dict[str, Any]:
        with unexpected_as_internal("remove_from_cart"):
            return self.carts.remove_line(user_id, product_id)

    def clear_cart(self, user_id: str) -> None:
        with unexpected_as_internal("clear_cart"):
            if self.carts.clear(user_id):
                logger.info("Cart %s cleared", user_id)

    # ---------- queries ----------
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        """Cart lines joined with catalog data; lines for vanished products are skipped."""
        with unexpected_as_internal("get_cart"):
            cart = self.carts.get(user_id)
            catalog = self.products.get_many(line["product_id"] for line in cart["products"])

        items = []
        total = 0.0
        for line in cart["products"]:
            product = catalog.get(line["product_id"])
            if not product:
                logger.warning("Cart %s references missing product %s", user_id, line["product_id"])
                continue
            price = float(product.get("price", 0) or 0)
            subtotal = price * line["quantity"]
            total += subtotal
            items.append({
                "product_id": line["product_id"],
                "name": product.get("name", ""),
                "price": price,
                "image": product.get("image"),
                "quantity": line["quantity"],
                "subtotal": round(subtotal, 2),
            })
        return {"user_id": user_id, "items": items, "item_count": len(items), "total": round(total, 2)}
