"""
db/queries.py
-------------
Every SQL statement the product repository runs, in one place.

Statements are fixed at import time and take caller values only through
named driver placeholders (``%(name)s``). Nothing here is ever built
from caller-supplied text.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Statement:
    """
    A named, parameterized SQL statement.

    Attributes:
        name: Operation the statement belongs to.
        sql: Statement text with ``%(param)s`` placeholders.
        params: Placeholder names the statement expects.
        columns: Output columns, in select order (empty for writes without RETURNING).
        split_at: Index where the second entity's columns begin, for joined rows.
    """
    name: str
    sql: str
    params: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()
    split_at: Optional[int] = None

    def bind(self, **values: Any) -> Mapping[str, Any]:
        """
        Build the parameter mapping passed to ``cursor.execute``.

        Raises:
            ValueError: If a placeholder is missing or an unknown name is given.
        """
        missing = set(self.params) - values.keys()
        unexpected = values.keys() - set(self.params)
        if missing or unexpected:
            raise ValueError(
                f"Bad parameters for '{self.name}': "
                f"missing={sorted(missing)} unexpected={sorted(unexpected)}"
            )
        return {name: values[name] for name in self.params}


PRODUCT_COLUMNS = ("Id", "Name", "Price", "Stock", "CreatedAt")
CATEGORY_COLUMNS = ("Id", "Name")


# ── READ ──────────────────────────────────────────────────

GET_ALL = Statement(
    name="get_all",
    sql="""
        SELECT Id, Name, Price, Stock, CreatedAt
        FROM Products
        ORDER BY Name;
    """,
    columns=PRODUCT_COLUMNS,
)

GET_BY_ID = Statement(
    name="get_by_id",
    sql="""
        SELECT Id, Name, Price, Stock, CreatedAt
        FROM Products
        WHERE Id = %(id)s;
    """,
    params=("id",),
    columns=PRODUCT_COLUMNS,
)

GET_WITH_LOW_STOCK = Statement(
    name="get_with_low_stock",
    sql="""
        SELECT Id, Name, Price, Stock, CreatedAt
        FROM Products
        WHERE Stock <= %(minimum_stock)s
        ORDER BY Stock ASC;
    """,
    params=("minimum_stock",),
    columns=PRODUCT_COLUMNS,
)

# Product columns first, then Category columns. The mapper splits at index 5.
GET_WITH_CATEGORIES = Statement(
    name="get_with_categories",
    sql="""
        SELECT p.Id, p.Name, p.Price, p.Stock, p.CreatedAt,
               c.Id, c.Name
        FROM Products p
        INNER JOIN Categories c ON p.CategoryId = c.Id
        ORDER BY p.Name;
    """,
    columns=PRODUCT_COLUMNS + CATEGORY_COLUMNS,
    split_at=len(PRODUCT_COLUMNS),
)

# ── AGGREGATES ────────────────────────────────────────────

COUNT_TOTAL = Statement(
    name="count_total",
    sql="SELECT COUNT(*) FROM Products;",
)

TOTAL_STOCK_VALUE = Statement(
    name="get_total_stock_value",
    sql="SELECT SUM(Price * Stock) FROM Products;",
)

EXISTS = Statement(
    name="exists",
    sql="SELECT COUNT(1) FROM Products WHERE Id = %(id)s;",
    params=("id",),
)

# ── WRITE ─────────────────────────────────────────────────

INSERT = Statement(
    name="add",
    sql="""
        INSERT INTO Products (Name, Price, Stock, CreatedAt)
        VALUES (%(name)s, %(price)s, %(stock)s, %(created_at)s)
        RETURNING Id;
    """,
    params=("name", "price", "stock", "created_at"),
    columns=("Id",),
)

UPDATE = Statement(
    name="update",
    sql="""
        UPDATE Products
        SET Name = %(name)s, Price = %(price)s, Stock = %(stock)s
        WHERE Id = %(id)s;
    """,
    params=("id", "name", "price", "stock"),
)

UPDATE_PRICE = Statement(
    name="update_price",
    sql="UPDATE Products SET Price = %(price)s WHERE Id = %(id)s;",
    params=("id", "price"),
)

DELETE = Statement(
    name="delete",
    sql="DELETE FROM Products WHERE Id = %(id)s;",
    params=("id",),
)


CATALOG: dict[str, Statement] = {
    stmt.name: stmt
    for stmt in (
        GET_ALL,
        GET_BY_ID,
        GET_WITH_LOW_STOCK,
        GET_WITH_CATEGORIES,
        COUNT_TOTAL,
        TOTAL_STOCK_VALUE,
        EXISTS,
        INSERT,
        UPDATE,
        UPDATE_PRICE,
        DELETE,
    )
}
