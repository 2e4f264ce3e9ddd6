"""Shared fixtures: settings and an in-memory stand-in for asyncpg connections."""

import operator
import re
from contextlib import asynccontextmanager
from decimal import Decimal

import pytest

from core.config import DatabaseSettings


class FakeConnection:
    """Records every query and answers with canned rows."""

    def __init__(self, *, row=None, rows=None, error=None):
        self.row = row
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return self.row

    async def fetch(self, sql, *args):
        self.calls.append((sql, args))
        if self.error is not None:
            raise self.error
        return list(self.rows)


def _ilike(value, pattern):
    regex = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            regex.append(re.escape(next(chars)))
        elif ch == "%":
            regex.append(".*")
        elif ch == "_":
            regex.append(".")
        else:
            regex.append(re.escape(ch))
    return re.fullmatch("".join(regex), value, re.IGNORECASE | re.DOTALL) is not None


class InMemoryProducts:
    """
    Evaluates the repository's INSERT and SELECT statements against a list
    of rows. Only the predicate shapes the repository emits are understood;
    anything else fails loudly.
    """

    PREDICATE = re.compile(r"^(\w+) (=|>=|<=|ILIKE) \$(\d+)(?: ESCAPE '\\')?$")
    OPS = {
        "=": operator.eq,
        ">=": operator.ge,
        "<=": operator.le,
        "ILIKE": _ilike,
    }

    def __init__(self):
        self.rows = []
        self.calls = []

    async def fetchrow(self, sql, *args):
        self.calls.append((sql, args))
        if sql.strip().startswith("INSERT"):
            row = {
                "id": len(self.rows) + 1,
                "user_id": args[0],
                "product_name": args[1],
                "product_description": args[2],
                "product_images": list(args[3]),
                "product_price": args[4],
            }
            self.rows.append(row)
            return {"id": row["id"]}
        rows = self._select(sql, args)
        return rows[0] if rows else None

    async def fetch(self, sql, *args):
        self.calls.append((sql, args))
        return self._select(sql, args)

    def _select(self, sql, args):
        _, _, where = sql.partition("WHERE")
        checks = []
        for predicate in filter(None, (p.strip() for p in where.split(" AND "))):
            match = self.PREDICATE.match(predicate)
            assert match, f"unsupported predicate: {predicate!r}"
            column, op, position = match.groups()
            checks.append((column, self.OPS[op], args[int(position) - 1]))
        assert len(checks) == len(args), "every bound value needs exactly one placeholder"
        return [
            dict(row)
            for row in self.rows
            if all(row[column] is not None and op(row[column], value) for column, op, value in checks)
        ]


class FakeConnector:
    """Drop-in for `core.db.connect` that counts opens and closes."""

    def __init__(self, conn=None, *, open_error=None):
        self.conn = conn or FakeConnection()
        self.open_error = open_error
        self.settings_seen = []
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self, settings):
        self.settings_seen.append(settings)
        if self.open_error is not None:
            raise self.open_error
        self.opened += 1
        try:
            yield self.conn
        finally:
            self.closed += 1


def product_row(**overrides):
    row = {
        "id": 1,
        "user_id": 3,
        "product_name": "Blue Shirt",
        "product_description": "Cotton shirt",
        "product_images": ["https://img.example/1.png"],
        "product_price": Decimal("19.99"),
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row():
    return product_row


@pytest.fixture
def db_settings():
    return DatabaseSettings(
        host="db.internal",
        port=5432,
        user="app",
        password="secret",
        name="products",
    )
