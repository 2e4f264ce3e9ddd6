"""
Request-scoped dependencies for product routes.
"""

from __future__ import annotations

from fastapi import Request

from core.config import DatabaseSettings

from .repository import ProductRepository


def get_database_settings(request: Request) -> DatabaseSettings:
    # Set once by the app lifespan (see `api/main.py`).
    return request.app.state.db_settings


def get_product_repository(request: Request) -> ProductRepository:
    return ProductRepository(get_database_settings(request))
