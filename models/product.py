"""
models/product.py
-----------------
Domain model for stocked products.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from models.category import Category


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """
    Represents a single product kept in stock.

    Attributes:
        name: Product name (non-empty).
        price: Unit price, never negative.
        stock: Units on hand, never negative.
        id: Database primary key (None for new records).
        created_at: Creation timestamp in UTC, set once on insert.
        category: Only populated by the joined product/category fetch.
    """
    name: str
    price: Decimal
    stock: int = 0
    id: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)
    category: Optional[Category] = None

    @property
    def has_stock(self) -> bool:
        """Returns True if at least one unit is on hand."""
        return self.stock > 0

    def __str__(self) -> str:
        return f"#{self.id} {self.name} | {self.price:.2f} | stock {self.stock}"
