"""
db/row_mapper.py
----------------
Turns result rows into domain objects.

Each entity has an explicit mapping table (column name -> dataclass field).
Rows are matched by column name, so the select order of a single entity's
columns does not matter. Joined rows are split at an explicit index first:
both Product and Category have ``Id``/``Name`` columns, and the split
point is what tells them apart.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from db.queries import Statement
from exceptions import MappingError
from models.category import Category
from models.product import Product


def as_decimal(value: Any) -> Decimal:
    """NUMERIC columns already arrive as Decimal; anything else is converted via str."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def column_names(description: Sequence[Sequence[Any]]) -> list[str]:
    """Extract column names from a DB-API ``cursor.description``."""
    return [col[0] for col in description]


@dataclass(frozen=True)
class EntityMapping:
    """
    Declared column -> field table for one entity.

    Attributes:
        factory: Callable building the entity from keyword arguments.
        fields: Lower-case column name -> constructor keyword.
        converters: Constructor keyword -> conversion applied to non-NULL values.
    """
    factory: Callable[..., Any]
    fields: Mapping[str, str]
    converters: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)

    def check(self, columns: Iterable[str]) -> None:
        """
        Verify that ``columns`` are exactly this entity's mapped columns.

        Raises:
            MappingError: On duplicate, unknown or missing columns.
        """
        seen: set[str] = set()
        for name in columns:
            key = name.lower()
            if key in seen:
                raise MappingError(f"Duplicate column '{name}' for {self._label}")
            if key not in self.fields:
                raise MappingError(f"Unmapped column '{name}' for {self._label}")
            seen.add(key)
        missing = set(self.fields) - seen
        if missing:
            raise MappingError(f"Missing columns {sorted(missing)} for {self._label}")

    def map_row(self, columns: Sequence[str], row: Sequence[Any]) -> Any:
        """
        Build one entity from a row, matching values to fields by column name.

        Args:
            columns: Column names, in the same order as ``row``.
            row: The row values.
        """
        if len(columns) != len(row):
            raise MappingError(
                f"Row has {len(row)} values but {len(columns)} column names"
            )
        self.check(columns)
        kwargs = {}
        for name, value in zip(columns, row):
            attr = self.fields[name.lower()]
            convert = self.converters.get(attr)
            kwargs[attr] = convert(value) if convert and value is not None else value
        return self.factory(**kwargs)

    @property
    def _label(self) -> str:
        return getattr(self.factory, "__name__", repr(self.factory))


PRODUCT_MAPPING = EntityMapping(
    factory=Product,
    fields={
        "id": "id",
        "name": "name",
        "price": "price",
        "stock": "stock",
        "createdat": "created_at",
    },
    converters={"price": as_decimal, "created_at": as_utc},
)

CATEGORY_MAPPING = EntityMapping(
    factory=Category,
    fields={"id": "id", "name": "name"},
)


def _attach_category(product: Product, category: Category) -> Product:
    product.category = category
    return product


def map_joined(
    columns: Sequence[str],
    row: Sequence[Any],
    split_at: int,
    first: EntityMapping = PRODUCT_MAPPING,
    second: EntityMapping = CATEGORY_MAPPING,
    attach: Callable[[Any, Any], Any] = _attach_category,
) -> Any:
    """
    Map a row holding two entities side by side.

    Columns ``[0, split_at)`` belong to ``first`` and ``[split_at, end)`` to
    ``second``. Both are built independently, then ``attach`` links the
    second onto the first and its result is returned.

    Raises:
        MappingError: If the split point falls outside the row.
    """
    if not 0 < split_at < len(columns):
        raise MappingError(
            f"Split point {split_at} is outside a row of {len(columns)} columns"
        )
    head = first.map_row(columns[:split_at], row[:split_at])
    tail = second.map_row(columns[split_at:], row[split_at:])
    return attach(head, tail)


# Which mapping(s) each row-returning statement is read with.
MAPPED_STATEMENTS: dict[str, tuple[EntityMapping, ...]] = {
    "get_all": (PRODUCT_MAPPING,),
    "get_by_id": (PRODUCT_MAPPING,),
    "get_with_low_stock": (PRODUCT_MAPPING,),
    "get_with_categories": (PRODUCT_MAPPING, CATEGORY_MAPPING),
}


def validate_statement(statement: Statement, *mappings: EntityMapping) -> None:
    """Check a statement's declared output columns against its mapping(s)."""
    if len(mappings) == 1:
        mappings[0].check(statement.columns)
        return
    if len(mappings) != 2:
        raise MappingError(f"'{statement.name}': expected one or two mappings")
    split_at: Optional[int] = statement.split_at
    if split_at is None:
        raise MappingError(f"'{statement.name}' maps two entities but declares no split point")
    mappings[0].check(statement.columns[:split_at])
    mappings[1].check(statement.columns[split_at:])


def validate_catalog(catalog: Mapping[str, Statement]) -> None:
    """
    Validate every mapped statement once, at startup.

    Raises:
        MappingError: If a statement is missing or its columns do not line up.
    """
    for name, mappings in MAPPED_STATEMENTS.items():
        statement = catalog.get(name)
        if statement is None:
            raise MappingError(f"Statement '{name}' is not in the query catalog")
        validate_statement(statement, *mappings)
