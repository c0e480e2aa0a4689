"""
haatbazar/routers/orders.py

User endpoints
- POST /orders, GET /orders   -> the caller's orders, newest first ([] when none)
- GET  /orders/{order_id}     -> one order (own orders only; admins see all)
- POST /orders/checkout       -> create an order from the current cart, then clear the cart

Admin endpoints (mounted under /admin)
- GET   /admin/orders
- PATCH /admin/orders/{order_id}/status
- PATCH /admin/orders/{order_id}/payment-status
"""
from typing import List

from fastapi import APIRouter, Depends, status

from haatbazar.core.auth import get_principal, require_admin, require_non_guest
from haatbazar.core.deps import get_order_service
from haatbazar.schemas.order import OrderCreate, OrderOut, OrderStatusBody, PaymentStatusBody
from haatbazar.schemas.principal import Principal
from haatbazar.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])
admin_router = APIRouter(prefix="/orders", tags=["Admin Orders"], dependencies=[Depends(require_admin)])


@router.post("", response_model=List[OrderOut])
def list_my_orders(principal: Principal = Depends(get_principal), svc: OrderService = Depends(get_order_service)):
    return svc.get_orders(principal.uid)


@router.get("", response_model=List[OrderOut])
def list_my_orders_get(principal: Principal = Depends(get_principal), svc: OrderService = Depends(get_order_service)):
    return svc.get_orders(principal.uid)


@router.post("/checkout", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: OrderCreate,
    principal: Principal = Depends(require_non_guest),
    svc: OrderService = Depends(get_order_service),
):
    return svc.create_order(principal.uid, payload)


@router.get("/{order_id}", response_model=OrderOut)
def get_order_detail(
    order_id: str,
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(principal, order_id)


@admin_router.get("", response_model=List[OrderOut])
def admin_list_orders(svc: OrderService = Depends(get_order_service)):
    return svc.list_all()


@admin_router.patch("/{order_id}/status", response_model=OrderOut)
def admin_update_status(order_id: str, payload: OrderStatusBody, svc: OrderService = Depends(get_order_service)):
    return svc.update_status(order_id, payload.status)


@admin_router.patch("/{order_id}/payment-status", response_model=OrderOut)
def admin_update_payment_status(
    order_id: str, payload: PaymentStatusBody, svc: OrderService = Depends(get_order_service)
):
    return svc.update_payment_status(order_id, payload.status)
