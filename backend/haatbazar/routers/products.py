"""
haatbazar/routers/products.py

Public
- GET /products?category=   -> every product (optionally one category), newest first
- GET /products/{id}        -> one product, 404 when missing
- GET /search?q=            -> {"results": [...]}, at most `search_limit` rows

Admin (mounted under /admin)
- POST   /admin/products
- PATCH  /admin/products/{id}
- DELETE /admin/products/{id}
- PUT    /admin/products/stock   -> bulk count_in_stock update
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from haatbazar.core.auth import require_admin
from haatbazar.core.deps import get_catalog_service
from haatbazar.schemas.product import ProductCreate, ProductOut, ProductSummary, ProductUpdate, StockUpdate
from haatbazar.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])
search_router = APIRouter(tags=["Search"])
admin_router = APIRouter(prefix="/products", tags=["Admin Products"], dependencies=[Depends(require_admin)])


class SearchOut(BaseModel):
    results: List[ProductSummary]


class StockResult(BaseModel):
    updated: int
    not_found: int


@router.get("", response_model=List[ProductOut], summary="List Products")
def list_products(
    category: Optional[str] = Query(None, description="Category name (optional)"),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.list_products(category)


@router.get("/{product_id}", response_model=ProductOut, summary="Get Product")
def get_product(product_id: str, svc: CatalogService = Depends(get_catalog_service)):
    return svc.get_product(product_id)


@search_router.get("/search", response_model=SearchOut, summary="Search Products")
def search_products(
    q: Optional[str] = Query(None, description="Case-insensitive text to look for in name or description"),
    svc: CatalogService = Depends(get_catalog_service),
):
    return {"results": svc.search(q)}


@admin_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED, summary="Create Product")
def create_product(payload: ProductCreate, svc: CatalogService = Depends(get_catalog_service)):
    return svc.create_product(payload)


@admin_router.put("/stock", response_model=StockResult, summary="Update Stock")
def update_stock(payload: List[StockUpdate], svc: CatalogService = Depends(get_catalog_service)):
    return svc.update_stock(payload)


@admin_router.patch("/{product_id}", response_model=ProductOut, summary="Update Product")
def update_product(product_id: str, payload: ProductUpdate, svc: CatalogService = Depends(get_catalog_service)):
    return svc.update_product(product_id, payload)


@admin_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Product")
def delete_product(product_id: str, svc: CatalogService = Depends(get_catalog_service)):
    svc.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
