"""
api/schemas.py
--------------
Request and response bodies for the HTTP API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.product import Product

# Column limits of Products.Price NUMERIC(12,2) and Products.Stock INT.
PRICE_MAX_DIGITS = 12
PRICE_DECIMAL_PLACES = 2
STOCK_MAX = 2_147_483_647


class ProductIn(BaseModel):
    """Body of a create request."""
    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)
    stock: int = Field(default=0, ge=0, le=STOCK_MAX)

    def to_product(self, product_id: Optional[int] = None) -> Product:
        return Product(name=self.name, price=self.price, stock=self.stock, id=product_id)


class ProductUpdate(ProductIn):
    """Body of a full update; `id` must match the path."""
    id: int


class PriceUpdate(BaseModel):
    price: Decimal = Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    stock: int
    has_stock: bool
    created_at: datetime
    category: Optional[CategoryOut] = None


class ProductCreated(BaseModel):
    id: int
    message: str


class StockSummary(BaseModel):
    count: int
    total_stock_value: Decimal
