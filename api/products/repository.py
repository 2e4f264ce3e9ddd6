"""
Product persistence (raw SQL).

Table (see `db/schema.sql`):
    products(id, user_id, product_name, product_description, product_images, product_price)

Each call opens its own connection and closes it before returning.
Storage failures are logged with the operation name only; parameter values
stay out of the logs.
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable

import asyncpg
from pydantic import ValidationError

from core import db
from core.config import DatabaseSettings

from . import filters
from .errors import InvalidProductId, ProductDecodeError, ProductNotFound, StorageError
from .schemas import BIGINT_MAX, BIGINT_MIN, Product, ProductCreate, ProductFilters

logger = logging.getLogger(__name__)

Connector = Callable[[DatabaseSettings], AbstractAsyncContextManager[asyncpg.Connection]]


def parse_product_id(raw: int | str) -> int:
    """
    Accept an int or its decimal text form (as taken from a URL path).
    """
    if isinstance(raw, bool):
        raise InvalidProductId(raw)
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        try:
            value = int(text)
        except ValueError as exc:
            raise InvalidProductId(raw) from exc
    if not BIGINT_MIN <= value <= BIGINT_MAX:
        raise InvalidProductId(raw)
    return value


def _decode_row(row: dict[str, Any]) -> Product:
    try:
        return Product(
            id=row["id"],
            user_id=row["user_id"],
            name=row["product_name"],
            description=row["product_description"],
            # NULL array reads back as an empty list.
            images=row["product_images"] or [],
            price=row["product_price"],
        )
    except ValidationError as exc:
        fields = [str(err["loc"][0]) for err in exc.errors() if err.get("loc")]
        raise ProductDecodeError(row.get("id"), fields) from exc


class ProductRepository:
    def __init__(self, settings: DatabaseSettings, *, connect: Connector = db.connect) -> None:
        self._settings = settings
        self._connect = connect

    async def create_product(self, product: ProductCreate) -> int:
        """
        Insert one product and return the id the database assigned.
        """
        try:
            async with self._connect(self._settings) as conn:
                row = await db.fetch_one(
                    conn,
                    """
                    INSERT INTO products (user_id, product_name, product_description, product_images, product_price)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING id
                    """,
                    product.user_id,
                    product.name,
                    product.description,
                    list(product.images),
                    filters.numeric_arg(product.price),
                )
        except db.DATABASE_ERRORS as exc:
            logger.exception("product_query_failed operation=create")
            raise StorageError("create") from exc

        if row is None or row.get("id") is None:
            raise StorageError("create", "Insert returned no id.")

        product_id = int(row["id"])
        logger.info("product_created id=%s user_id=%s", product_id, product.user_id)
        return product_id

    async def get_product_by_id(self, product_id: int | str) -> Product:
        """
        Raises InvalidProductId, ProductNotFound or StorageError.
        """
        pid = parse_product_id(product_id)
        try:
            async with self._connect(self._settings) as conn:
                row = await db.fetch_one(
                    conn,
                    f"""
                    SELECT {filters.PRODUCT_COLUMNS}
                    FROM products
                    WHERE id = $1
                    """,
                    pid,
                )
        except db.DATABASE_ERRORS as exc:
            logger.exception("product_query_failed operation=get")
            raise StorageError("get") from exc

        if row is None:
            raise ProductNotFound(pid)

        try:
            return _decode_row(row)
        except ProductDecodeError as exc:
            logger.error("product_row_undecodable id=%s fields=%s", exc.row_id, exc.fields)
            raise StorageError("get", str(exc)) from exc

    async def list_products(self, product_filters: ProductFilters | None = None) -> list[Product]:
        """
        List products matching every present filter.

        Lenient decoding: a row that does not fit the Product shape is
        logged and skipped, the rest of the list is still returned.
        """
        sql, args = filters.build_list_query(product_filters)
        try:
            async with self._connect(self._settings) as conn:
                rows = await db.fetch_all(conn, sql, *args)
        except db.DATABASE_ERRORS as exc:
            logger.exception("product_query_failed operation=list")
            raise StorageError("list") from exc

        products: list[Product] = []
        for row in rows:
            try:
                products.append(_decode_row(row))
            except ProductDecodeError as exc:
                logger.warning("product_row_skipped id=%s fields=%s", exc.row_id, exc.fields)
        return products
