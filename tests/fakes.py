"""
In-memory stand-in for a psycopg2 connection, used instead of a live
PostgreSQL server. It only understands the statements in the query
catalog and answers them from plain dicts.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import psycopg2

from db.queries import CATALOG

_BY_SQL = {stmt.sql: stmt for stmt in CATALOG.values()}

PRODUCT_DESCRIPTION = ["id", "name", "price", "stock", "createdat"]
CATEGORY_DESCRIPTION = ["id", "name"]


def _describe(names):
    # DB-API description: 7-item sequences, name first.
    return [(name, None, None, None, None, None, None) for name in names]


class FakeStore:
    """Tables, id sequence and a log of everything that was executed."""

    def __init__(self):
        self.products: dict[int, dict] = {}
        self.categories: dict[int, str] = {}
        self._next_product_id = 1
        self._next_category_id = 1
        self.executed: list[str] = []
        self.connections: list["FakeConnection"] = []
        self.fail_on: Optional[str] = None
        self.fail_connect = False

    # ── driver entry point ────────────────────────────────

    def connect(self, dsn: str) -> "FakeConnection":
        if self.fail_connect:
            raise psycopg2.OperationalError("could not connect to server: Connection refused")
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn

    @property
    def open_connections(self) -> list["FakeConnection"]:
        return [c for c in self.connections if not c.closed]

    # ── seeding ───────────────────────────────────────────

    def seed_category(self, name: str) -> int:
        category_id = self._next_category_id
        self._next_category_id += 1
        self.categories[category_id] = name
        return category_id

    def seed_product(self, name: str, price: str, stock: int, category_id: Optional[int] = None) -> int:
        product_id = self._next_product_id
        self._next_product_id += 1
        self.products[product_id] = {
            "name": name,
            "price": Decimal(price),
            "stock": stock,
            "created_at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            "category_id": category_id,
        }
        return product_id

    # ── statement handlers ────────────────────────────────

    def run(self, name: str, params: dict) -> tuple[list, list[tuple], int]:
        """Returns (column names, rows, rowcount)."""
        self.executed.append(name)
        if self.fail_on == name:
            raise psycopg2.OperationalError("server closed the connection unexpectedly")
        return getattr(self, f"_{name}")(params)

    def _product_row(self, product_id: int) -> tuple:
        p = self.products[product_id]
        return (product_id, p["name"], p["price"], p["stock"], p["created_at"])

    def _product_rows(self, ids) -> tuple[list, list[tuple], int]:
        rows = [self._product_row(i) for i in ids]
        return PRODUCT_DESCRIPTION, rows, len(rows)

    @staticmethod
    def _check(name: str, price: Decimal, stock: int) -> None:
        if not name or price < 0 or stock < 0:
            raise psycopg2.IntegrityError('new row for relation "products" violates check constraint')

    def _get_all(self, params):
        return self._product_rows(sorted(self.products, key=lambda i: self.products[i]["name"]))

    def _get_by_id(self, params):
        ids = [params["id"]] if params["id"] in self.products else []
        return self._product_rows(ids)

    def _get_with_low_stock(self, params):
        ids = [i for i, p in self.products.items() if p["stock"] <= params["minimum_stock"]]
        return self._product_rows(sorted(ids, key=lambda i: self.products[i]["stock"]))

    def _get_with_categories(self, params):
        ids = sorted(
            (i for i, p in self.products.items() if p["category_id"] in self.categories),
            key=lambda i: self.products[i]["name"],
        )
        rows = []
        for i in ids:
            category_id = self.products[i]["category_id"]
            rows.append(self._product_row(i) + (category_id, self.categories[category_id]))
        return PRODUCT_DESCRIPTION + CATEGORY_DESCRIPTION, rows, len(rows)

    def _count_total(self, params):
        return ["count"], [(len(self.products),)], 1

    def _get_total_stock_value(self, params):
        if not self.products:
            return ["sum"], [(None,)], 1
        total = sum(p["price"] * p["stock"] for p in self.products.values())
        return ["sum"], [(total,)], 1

    def _exists(self, params):
        return ["count"], [(1 if params["id"] in self.products else 0,)], 1

    def _add(self, params):
        self._check(params["name"], Decimal(params["price"]), params["stock"])
        product_id = self._next_product_id
        self._next_product_id += 1
        self.products[product_id] = {
            "name": params["name"],
            "price": Decimal(params["price"]),
            "stock": params["stock"],
            "created_at": params["created_at"],
            "category_id": None,
        }
        return ["id"], [(product_id,)], 1

    def _update(self, params):
        product = self.products.get(params["id"])
        if product is None:
            return [], [], 0
        self._check(params["name"], Decimal(params["price"]), params["stock"])
        product.update(name=params["name"], price=Decimal(params["price"]), stock=params["stock"])
        return [], [], 1

    def _update_price(self, params):
        product = self.products.get(params["id"])
        if product is None:
            return [], [], 0
        self._check(product["name"], Decimal(params["price"]), product["stock"])
        product["price"] = Decimal(params["price"])
        return [], [], 1

    def _delete(self, params):
        if self.products.pop(params["id"], None) is None:
            return [], [], 0
        return [], [], 1


class FakeCursor:
    def __init__(self, store: FakeStore):
        self._store = store
        self._rows: list[tuple] = []
        self.description = None
        self.rowcount = -1
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        statement = _BY_SQL.get(sql)
        if statement is None:
            raise AssertionError(f"Statement not in the catalog: {sql!r}")
        assert isinstance(params, dict) or params is None
        names, rows, rowcount = self._store.run(statement.name, dict(params or {}))
        self.description = _describe(names) if names else None
        self._rows = list(rows)
        self.rowcount = rowcount

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class FakeConnection:
    def __init__(self, store: FakeStore):
        self._store = store
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self._store)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True
