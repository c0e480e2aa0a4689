"""
haatbazar/routers/cart.py
Cart endpoints (logged-in users): add by id, change a line's quantity, remove one line,
clear, and get the full cart with product information.

Behavior
- POST /cart takes {productId, quantity?}; a missing quantity means 1, zero or negative
  quantities are rejected with 400 before anything is written.
- Adding a product already in the cart increments that line instead of adding a second one.
- GET /cart joins lines with the catalog; lines whose product was deleted are skipped.
"""
from fastapi import APIRouter, Depends, Response, status

from haatbazar.core.auth import get_principal
from haatbazar.core.deps import get_cart_service
from haatbazar.schemas.cart import AddToCartBody, CartDetailOut, CartOut, UpdateQuantityBody
from haatbazar.schemas.principal import Principal
from haatbazar.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post("", response_model=CartOut)
def add_to_cart(
    payload: AddToCartBody,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_to_cart(principal.uid, payload.product_id, payload.quantity)


@router.get("", response_model=CartDetailOut)
def get_cart(principal: Principal = Depends(get_principal), svc: CartService = Depends(get_cart_service)):
    return svc.get_cart(principal.uid)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_quantity(
    product_id: str,
    payload: UpdateQuantityBody,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_quantity(principal.uid, product_id, payload.quantity)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_cart_item(
    product_id: str,
    principal: Principal = Depends(get_principal),
    svc: CartService = Depends(get_cart_service),
):
    """Remove one line by its product id."""
    return svc.remove_from_cart(principal.uid, product_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(principal: Principal = Depends(get_principal), svc: CartService = Depends(get_cart_service)):
    """Clear the entire cart."""
    svc.clear_cart(principal.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
