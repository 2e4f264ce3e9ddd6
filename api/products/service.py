"""
Product business logic.

Maps repository outcomes to HTTP:
- validation problems -> 400
- missing product     -> 404
- storage failures    -> 500
"""

from __future__ import annotations

from fastapi import HTTPException, status

from . import errors, schemas
from .repository import ProductRepository


async def create_product(payload: schemas.ProductCreate, *, repo: ProductRepository) -> dict:
    try:
        product_id = await repo.create_product(payload)
    except errors.StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create product.",
        ) from exc

    return {"message": "Product created successfully", "productId": product_id}


async def get_product(product_id: str, *, repo: ProductRepository) -> dict:
    try:
        product = await repo.get_product_by_id(product_id)
    except errors.ProductValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except errors.ProductNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.") from exc
    except errors.StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch product.",
        ) from exc

    return {"product": product.model_dump(by_alias=True)}


async def list_products(
    *,
    repo: ProductRepository,
    user_id: str | None = None,
    min_price: str | None = None,
    max_price: str | None = None,
    product_name: str | None = None,
) -> dict:
    try:
        product_filters = schemas.parse_filters(
            user_id=user_id,
            min_price=min_price,
            max_price=max_price,
            name=product_name,
        )
    except errors.ProductValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        products = await repo.list_products(product_filters)
    except errors.StorageError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch products.",
        ) from exc

    return {
        "products": [p.model_dump(by_alias=True) for p in products],
        "count": len(products),
    }
