"""
repositories/product_repo.py
-----------------------------
Data access layer for products.
Every statement against the `Products` table goes through here.

Each call opens its own connection and releases it before returning,
whatever happens. Driver errors never leave this module: they are logged
and re-raised as RepositoryError.
"""

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator, Optional

import psycopg2

from config import LOW_STOCK_THRESHOLD
from db import queries
from db.connection import ConnectionProvider
from db.queries import Statement
from db.row_mapper import PRODUCT_MAPPING, as_decimal, as_utc, column_names, map_joined
from exceptions import RepositoryError
from models.product import Product
from utils.logger import get_logger

logger = get_logger(__name__)


class ProductRepository:
    """Repository for CRUD and reporting operations on the products table."""

    def __init__(self, provider: ConnectionProvider):
        self._provider = provider

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[Product]:
        """
        Fetch every product.

        Returns:
            List of Product objects ordered by name.
        """
        with self._cursor(queries.GET_ALL.name) as cur:
            self._run(cur, queries.GET_ALL)
            products = self._map_products(cur)
        logger.debug(f"Fetched {len(products)} products")
        return products

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """
        Fetch a single product by ID.

        Returns:
            A Product or None if not found.
        """
        with self._cursor(queries.GET_BY_ID.name, id=product_id) as cur:
            self._run(cur, queries.GET_BY_ID, id=product_id)
            row = cur.fetchone()
            product = PRODUCT_MAPPING.map_row(column_names(cur.description), row) if row else None
        if product is None:
            logger.warning(f"Product #{product_id} not found")
        return product

    def get_with_low_stock(self, minimum_stock: Optional[int] = None) -> list[Product]:
        """
        Fetch products whose stock is at or below a threshold.

        Args:
            minimum_stock: Threshold (inclusive). Defaults to LOW_STOCK_THRESHOLD.

        Returns:
            List of Product objects ordered by stock ascending.
        """
        if minimum_stock is None:
            minimum_stock = LOW_STOCK_THRESHOLD
        stmt = queries.GET_WITH_LOW_STOCK
        with self._cursor(stmt.name, minimum_stock=minimum_stock) as cur:
            self._run(cur, stmt, minimum_stock=minimum_stock)
            products = self._map_products(cur)
        logger.info(f"Found {len(products)} products with stock <= {minimum_stock}")
        return products

    def get_with_categories(self) -> list[Product]:
        """
        Fetch products joined with their category.

        Products without a category are not returned.
        """
        stmt = queries.GET_WITH_CATEGORIES
        with self._cursor(stmt.name) as cur:
            self._run(cur, stmt)
            columns = column_names(cur.description)
            return [map_joined(columns, row, split_at=stmt.split_at) for row in cur.fetchall()]

    # ── AGGREGATES ────────────────────────────────────────

    def count_total(self) -> int:
        """Number of products in the store (0 when empty)."""
        with self._cursor(queries.COUNT_TOTAL.name) as cur:
            self._run(cur, queries.COUNT_TOTAL)
            return int(cur.fetchone()[0])

    def get_total_stock_value(self) -> Decimal:
        """
        Sum of price * stock over all products.

        SUM over an empty table is NULL in SQL; that is reported as 0.
        """
        with self._cursor(queries.TOTAL_STOCK_VALUE.name) as cur:
            self._run(cur, queries.TOTAL_STOCK_VALUE)
            value = cur.fetchone()[0]
        return as_decimal(value) if value is not None else Decimal(0)

    def exists(self, product_id: int) -> bool:
        """
        Check whether a product exists.

        Non-positive ids are never valid and are answered without a query.
        """
        if product_id <= 0:
            return False
        with self._cursor(queries.EXISTS.name, id=product_id) as cur:
            self._run(cur, queries.EXISTS, id=product_id)
            return cur.fetchone()[0] > 0

    # ── CREATE ────────────────────────────────────────────

    def add(self, product: Product) -> int:
        """
        Insert a new product. Any id already set on `product` is ignored.

        Args:
            product: The Product domain object to persist.

        Returns:
            The store-assigned id (also written back onto `product`).
        """
        values = {
            "name": product.name,
            "price": product.price,
            "stock": product.stock,
            "created_at": as_utc(product.created_at),
        }
        with self._cursor(queries.INSERT.name, **values) as cur:
            self._run(cur, queries.INSERT, **values)
            new_id = int(cur.fetchone()[0])
        product.id = new_id
        logger.info(f"Added product '{product.name}' as #{new_id}")
        return new_id

    # ── UPDATE ────────────────────────────────────────────

    def update(self, product: Product) -> bool:
        """
        Replace name, price and stock of an existing product.
        `created_at` is never touched.

        Args:
            product: Product with updated fields (must have id set).

        Returns:
            True if a row was updated, False if the id does not exist.
        """
        values = {
            "id": product.id,
            "name": product.name,
            "price": product.price,
            "stock": product.stock,
        }
        with self._cursor(queries.UPDATE.name, **values) as cur:
            self._run(cur, queries.UPDATE, **values)
            updated = cur.rowcount > 0
        if updated:
            logger.info(f"Updated product #{product.id}")
        else:
            logger.warning(f"Tried to update missing product #{product.id}")
        return updated

    def update_price(self, product_id: int, new_price: Decimal) -> bool:
        """
        Change only the price of a product.

        Returns:
            True if a row was updated, False if the id does not exist.
        """
        with self._cursor(queries.UPDATE_PRICE.name, id=product_id, price=new_price) as cur:
            self._run(cur, queries.UPDATE_PRICE, id=product_id, price=new_price)
            updated = cur.rowcount > 0
        if updated:
            logger.info(f"Price of product #{product_id} set to {new_price}")
        else:
            logger.warning(f"Tried to reprice missing product #{product_id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, product_id: int) -> bool:
        """
        Delete a product by ID.

        Returns:
            True if a row was deleted, False otherwise.
        """
        with self._cursor(queries.DELETE.name, id=product_id) as cur:
            self._run(cur, queries.DELETE, id=product_id)
            deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Deleted product #{product_id}")
        else:
            logger.warning(f"Tried to delete missing product #{product_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @contextmanager
    def _cursor(self, operation: str, **params: Any) -> Iterator[Any]:
        """
        Open a connection for one operation and yield a cursor on it.

        The connection is committed on success, rolled back on error and
        closed in every case. psycopg2 errors become RepositoryError.
        """
        handle = self._provider.create_connection()
        try:
            with handle as conn:
                with conn.cursor() as cur:
                    yield cur
        except psycopg2.Error as e:
            logger.error(
                f"Repository operation '{operation}' failed: {e}",
                extra={"operation": operation, "params": params},
                exc_info=True,
            )
            raise RepositoryError(operation, e) from e

    @staticmethod
    def _run(cur: Any, statement: Statement, **values: Any) -> None:
        """Execute a catalog statement with bound parameters."""
        logger.debug(f"Executing '{statement.name}'")
        cur.execute(statement.sql, statement.bind(**values))

    @staticmethod
    def _map_products(cur: Any) -> list[Product]:
        """Map every remaining row of `cur` to a Product."""
        columns = column_names(cur.description)
        return [PRODUCT_MAPPING.map_row(columns, row) for row in cur.fetchall()]
