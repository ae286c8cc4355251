"""
models/ - Domain Layer
======================
Plain dataclasses describing the entities the service manages.
They carry no database or HTTP knowledge.
"""

from models.category import Category
from models.product import Product

__all__ = ["Category", "Product"]
