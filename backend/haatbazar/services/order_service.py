"""
haatbazar/services/order_service.py

Orders are read newest-first (created_at DESC). Checkout turns the user's cart into an
order: the cart lines are taken (and the cart emptied) in one atomic step, unit prices are
snapshotted from the catalog, and the lines go back into the cart if the order cannot be
written.
"""
import logging
import uuid
from typing import Any, Dict, List

from haatbazar.core.errors import (
    InvalidStatus,
    NotFound,
    OrderNotFound,
    ProductNotFound,
    unexpected_as_internal,
)
from haatbazar.repositories.carts import CartRepository
from haatbazar.repositories.orders import OrderRepository
from haatbazar.repositories.products import ProductRepository
from haatbazar.schemas.order import ORDER_STATUSES, PAYMENT_STATUSES, OrderCreate
from haatbazar.schemas.principal import Principal

logger = logging.getLogger("haatbazar.orders")


class OrderService:
    def __init__(self, orders: OrderRepository, carts: CartRepository, products: ProductRepository):
        self.orders = orders
        self.carts = carts
        self.products = products

    def get_orders(self, user_id: str) -> List[Dict[str, Any]]:
        with unexpected_as_internal("get_orders"):
            return self.orders.list_for_user(user_id)

    def get_order(self, principal: Principal, order_id: str) -> Dict[str, Any]:
        """Users see their own orders, admins see all. Foreign orders look like missing ones."""
        with unexpected_as_internal("get_order"):
            order = self.orders.get(order_id)
        if not order or (order.get("user_id") != principal.uid and principal.role != "admin"):
            raise OrderNotFound()
        return order

    def create_order(self, user_id: str, payload: OrderCreate) -> Dict[str, Any]:
        catalog: Dict[str, Dict[str, Any]] = {}

        def load_products(cart_lines: List[Dict[str, Any]]) -> None:
            missing = [line["product_id"] for line in cart_lines if line["product_id"] not in catalog]
            catalog.update(self.products.get_many(missing))
            for line in cart_lines:
                if line["product_id"] not in catalog:
                    raise ProductNotFound(f"Product {line['product_id']} is no longer available")

        with unexpected_as_internal("create_order"):
            cart_lines = self.carts.take_lines(user_id, check=load_products)
            lines = [
                {
                    "product_id": line["product_id"],
                    "name": catalog[line["product_id"]].get("name", ""),
                    "quantity": line["quantity"],
                    "price": float(catalog[line["product_id"]].get("price", 0) or 0),
                }
                for line in cart_lines
            ]

            subtotal = sum(item["price"] * item["quantity"] for item in lines)
            try:
                return self.orders.create({
                    "user_id": user_id,
                    "products": lines,
                    "total_amount": round(subtotal + payload.shipping, 2),
                    "shipping_address": payload.shipping_address,
                    "billing_address": payload.billing_address or payload.shipping_address,
                    "payment_info": {
                        "transaction_uuid": payload.transaction_uuid or uuid.uuid4().hex,
                        "method": payload.payment_method,
                        "status": "pending",
                    },
                    "status": "processing",
                })
            except Exception:
                logger.error("Order insert failed for %s; putting %d line(s) back", user_id, len(cart_lines))
                self.carts.restore_lines(user_id, cart_lines)
                raise

    # ---------- admin ----------
    def list_all(self) -> List[Dict[str, Any]]:
        with unexpected_as_internal("list_all_orders"):
            return self.orders.list_all()

    def update_status(self, order_id: str, status: str) -> Dict[str, Any]:
        if status not in ORDER_STATUSES:
            raise InvalidStatus(f"Order status must be one of {', '.join(ORDER_STATUSES)}")
        with unexpected_as_internal("update_order_status"):
            try:
                order = self.orders.update_status(order_id, status)
            except NotFound as exc:
                raise OrderNotFound() from exc
        logger.info("Order %s -> %s", order_id, status)
        return order

    def update_payment_status(self, order_id: str, status: str) -> Dict[str, Any]:
        if status not in PAYMENT_STATUSES:
            raise InvalidStatus(f"Payment status must be one of {', '.join(PAYMENT_STATUSES)}")
        with unexpected_as_internal("update_payment_status"):
            order = self.orders.update_payment_status(order_id, status)
        if order is None:
            raise OrderNotFound()
        return order
