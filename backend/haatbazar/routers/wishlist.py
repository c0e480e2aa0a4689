# haatbazar/routers/wishlist.py
from fastapi import APIRouter, Depends

from haatbazar.core.auth import get_principal
from haatbazar.core.deps import get_wishlist_service
from haatbazar.schemas.principal import Principal
from haatbazar.schemas.wishlist import AddToWishListBody, WishListOut
from haatbazar.services.wishlist_service import WishListService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.post("", response_model=WishListOut)
def add_to_wishlist(
    payload: AddToWishListBody,
    principal: Principal = Depends(get_principal),
    svc: WishListService = Depends(get_wishlist_service),
):
    return svc.add(principal.uid, payload.product_id)


@router.get("", response_model=WishListOut)
def get_wishlist(principal: Principal = Depends(get_principal), svc: WishListService = Depends(get_wishlist_service)):
    return svc.get(principal.uid)


@router.delete("/{product_id}", response_model=WishListOut)
def remove_from_wishlist(
    product_id: str,
    principal: Principal = Depends(get_principal),
    svc: WishListService = Depends(get_wishlist_service),
):
    return svc.remove(principal.uid, product_id)
