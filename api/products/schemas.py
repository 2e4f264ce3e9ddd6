"""
Product API schemas (request/response models).

JSON uses camelCase (`userId`); request bodies also accept the attribute
names (`user_id`).
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ProductValidationError

BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1

# Ids and owner ids live in BIGINT columns.
BigInt = Annotated[int, Field(ge=BIGINT_MIN, le=BIGINT_MAX)]


class ProductCreate(BaseModel):
    # Strict: JSON "3", true or "19.99" are type errors, not coerced values.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, strict=True)

    user_id: BigInt
    name: str
    description: str
    images: list[str]
    price: float = Field(..., allow_inf_nan=False)


class Product(ProductCreate):
    # Rows come back from asyncpg (numeric -> Decimal), so decoding is lax.
    model_config = ConfigDict(strict=False)

    id: BigInt


class ProductFilters(BaseModel):
    """
    Optional list filters, combined with AND. `None` means "no predicate".
    """

    user_id: BigInt | None = None
    min_price: FiniteFloat | None = None
    max_price: FiniteFloat | None = None
    name: str | None = None

    @field_validator("user_id", "min_price", "max_price", "name", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        # `?minPrice=` behaves as if the parameter was not sent.
        if isinstance(value, str) and not value.strip():
            return None
        return value


def parse_filters(
    *,
    user_id: str | None = None,
    min_price: str | None = None,
    max_price: str | None = None,
    name: str | None = None,
) -> ProductFilters:
    try:
        return ProductFilters(
            user_id=user_id,
            min_price=min_price,
            max_price=max_price,
            name=name,
        )
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ProductValidationError(f"Invalid filter value for: {fields}.") from exc
