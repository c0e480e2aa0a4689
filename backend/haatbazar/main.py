"""
haatbazar/main.py - Application entry point.

`create_app` is the composition root: it builds the document store from the settings
(without connecting), wires routers, CORS and exception handlers, and ties the store's
lifetime to the application's startup/shutdown events.

Public routers:  /cart, /wishlist, /orders, /transactions, /reviews, /products, /search, /health
Admin routers (prefix /admin, `require_admin`): /orders, /transactions, /products
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from haatbazar.config import Settings, settings as default_settings
from haatbazar.core.errors import register_exception_handlers
from haatbazar.routers import cart, health, orders, products, reviews, transactions, wishlist
from haatbazar.store import DocumentStore, create_store

logger = logging.getLogger("haatbazar")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title="HaatBazar API",
        description="Cart, wishlist, order, review and payment-record API for the HaatBazar storefront.",
        version="1.0.0",
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Public routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(products.search_router)
    app.include_router(cart.router)
    app.include_router(wishlist.router)
    app.include_router(orders.router)
    app.include_router(transactions.router)
    app.include_router(reviews.router)

    # Admin routers
    app.include_router(products.admin_router, prefix="/admin")
    app.include_router(orders.admin_router, prefix="/admin")
    app.include_router(transactions.admin_router, prefix="/admin")

    @app.on_event("startup")
    def _connect_store():
        app.state.store.connect()
        logger.info("Store connected (%s)", type(app.state.store).__name__)

    @app.on_event("shutdown")
    def _close_store():
        app.state.store.close()
        logger.info("Store closed")

    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("haatbazar.main:app", host="0.0.0.0", port=8000, reload=default_settings.debug)
