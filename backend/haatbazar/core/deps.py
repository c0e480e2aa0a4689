# haatbazar/core/deps.py
from fastapi import Depends, Request

from haatbazar.config import Settings
from haatbazar.repositories.carts import CartRepository
from haatbazar.repositories.orders import OrderRepository
from haatbazar.repositories.products import ProductRepository
from haatbazar.repositories.reviews import ReviewRepository
from haatbazar.repositories.transactions import TransactionRepository
from haatbazar.repositories.wishlists import WishListRepository
from haatbazar.services.cart_service import CartService
from haatbazar.services.catalog_service import CatalogService
from haatbazar.services.order_service import OrderService
from haatbazar.services.payment_service import PaymentService
from haatbazar.services.review_service import ReviewService
from haatbazar.services.wishlist_service import WishListService
from haatbazar.store import DocumentStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_cart_service(
    store: DocumentStore = Depends(get_store), settings: Settings = Depends(get_app_settings)
) -> CartService:
    return CartService(
        CartRepository(store, max_retries=settings.cart_max_retries),
        ProductRepository(store),
        verify_products=settings.verify_product_exists,
    )


def get_order_service(
    store: DocumentStore = Depends(get_store), settings: Settings = Depends(get_app_settings)
) -> OrderService:
    return OrderService(
        OrderRepository(store),
        CartRepository(store, max_retries=settings.cart_max_retries),
        ProductRepository(store),
    )


def get_catalog_service(
    store: DocumentStore = Depends(get_store), settings: Settings = Depends(get_app_settings)
) -> CatalogService:
    return CatalogService(ProductRepository(store), search_limit=settings.search_limit)


def get_review_service(store: DocumentStore = Depends(get_store)) -> ReviewService:
    return ReviewService(ReviewRepository(store), ProductRepository(store))


def get_wishlist_service(
    store: DocumentStore = Depends(get_store), settings: Settings = Depends(get_app_settings)
) -> WishListService:
    return WishListService(
        WishListRepository(store),
        ProductRepository(store),
        verify_products=settings.verify_product_exists,
    )


def get_payment_service(store: DocumentStore = Depends(get_store)) -> PaymentService:
    return PaymentService(TransactionRepository(store))
