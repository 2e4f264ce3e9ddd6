"""
Product API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from . import dependencies, schemas, service
from .repository import ProductRepository

router = APIRouter()


@router.post("/products")
async def create_product(
    request: schemas.ProductCreate,
    repo: ProductRepository = Depends(dependencies.get_product_repository),
) -> dict:
    return await service.create_product(request, repo=repo)


@router.get("/products/{product_id}")
async def get_product(
    product_id: str,
    repo: ProductRepository = Depends(dependencies.get_product_repository),
) -> dict:
    return await service.get_product(product_id, repo=repo)


@router.get("/products")
async def list_products(
    user_id: str | None = Query(default=None, alias="userId"),
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
    product_name: str | None = Query(default=None, alias="productName", max_length=500),
    repo: ProductRepository = Depends(dependencies.get_product_repository),
) -> dict:
    """
    List products. Every filter is optional; present filters are ANDed.
    """
    return await service.list_products(
        repo=repo,
        user_id=user_id,
        min_price=min_price,
        max_price=max_price,
        product_name=product_name,
    )
