"""
Dynamic WHERE clause for product listing.

Each optional filter contributes one (predicate, value) pair. Placeholders
are numbered only when the clause is rendered, so `$n` always points at the
n-th bound value no matter which subset of filters is present.

Predicates are written with a single `{}` where the placeholder goes:

    clause = WhereClause()
    clause.add("user_id = {}", 3)
    clause.add("product_price >= {}", Decimal("20"))
    clause.render()  # ("user_id = $1 AND product_price >= $2", [3, Decimal("20")])
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from .schemas import ProductFilters

PRODUCT_COLUMNS = "id, user_id, product_name, product_description, product_images, product_price"

LIST_PRODUCTS_SQL = f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products"""


class WhereClause:
    def __init__(self) -> None:
        self._predicates: list[tuple[str, Any]] = []

    def add(self, predicate: str, value: Any) -> WhereClause:
        if predicate.count("{}") != 1:
            raise ValueError(f"Predicate must contain exactly one placeholder: {predicate!r}")
        self._predicates.append((predicate, value))
        return self

    def render(self) -> tuple[str, list[Any]]:
        """
        Return (sql, args) with placeholders $1..$n in insertion order.
        """
        parts = [
            predicate.format(f"${index}")
            for index, (predicate, _) in enumerate(self._predicates, start=1)
        ]
        return " AND ".join(parts), [value for (_, value) in self._predicates]


def numeric_arg(value: float) -> Decimal:
    """
    Bind floats to numeric columns via their shortest repr (19.99, not
    19.989999999999998436805981327779591083526611328125).
    """
    return Decimal(repr(float(value)))


def escape_like(text: str) -> str:
    """
    Escape LIKE wildcards so user input matches literally.
    """
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_where(filters: ProductFilters) -> WhereClause:
    clause = WhereClause()
    if filters.user_id is not None:
        clause.add("user_id = {}", filters.user_id)
    if filters.min_price is not None:
        clause.add("product_price >= {}", numeric_arg(filters.min_price))
    if filters.max_price is not None:
        clause.add("product_price <= {}", numeric_arg(filters.max_price))
    if filters.name is not None:
        clause.add("product_name ILIKE {} ESCAPE '\\'", f"%{escape_like(filters.name)}%")
    return clause


def build_list_query(filters: ProductFilters | None = None) -> tuple[str, list[Any]]:
    """
    Build the list SELECT for the given filters. No ORDER BY: rows come back
    in storage order.
    """
    clause = build_where(filters or ProductFilters())
    where_sql, args = clause.render()
    if not where_sql:
        return LIST_PRODUCTS_SQL, []
    return f"{LIST_PRODUCTS_SQL}\n        WHERE {where_sql}", args
