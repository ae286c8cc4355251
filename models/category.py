"""
models/category.py
------------------
Domain model for product categories.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """
    A product category. Read-only from the product repository's point of view.

    Attributes:
        name: Display name of the category.
        id: Database primary key.
    """
    name: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return self.name
