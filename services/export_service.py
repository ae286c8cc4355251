"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the inventory.
"""

import io

import pandas as pd

from config import LOW_STOCK_THRESHOLD
from models.product import Product
from repositories.product_repo import ProductRepository
from utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_COLUMNS = ["id", "name", "price", "stock", "has_stock", "created_at"]


class ExportService:
    """Generates downloadable inventory reports in CSV and Excel formats."""

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def export_csv(self) -> io.BytesIO:
        """
        Export every product as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._products_frame(self.repo.get_all())
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} products as CSV")
        return buffer

    def export_excel(self) -> io.BytesIO:
        """
        Export every product as an Excel (.xlsx) file, with a summary sheet.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        df = self._products_frame(self.repo.get_all())
        # Excel cannot store tz-aware datetimes.
        df["created_at"] = df["created_at"].dt.tz_localize(None)

        summary = pd.DataFrame(
            [
                {"metric": "Products", "value": self.repo.count_total()},
                {"metric": "Total stock value", "value": float(self.repo.get_total_stock_value())},
                {
                    "metric": f"Low stock (<= {LOW_STOCK_THRESHOLD})",
                    "value": len(self.repo.get_with_low_stock(LOW_STOCK_THRESHOLD)),
                },
            ]
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Products", index=False)
            summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} products as Excel")
        return buffer

    @staticmethod
    def _products_frame(products: list[Product]) -> pd.DataFrame:
        """Flatten products into a DataFrame with a fixed column order."""
        data = [
            {
                "id": p.id,
                "name": p.name,
                "price": float(p.price),
                "stock": p.stock,
                "has_stock": p.has_stock,
                "created_at": p.created_at,
            }
            for p in products
        ]
        df = pd.DataFrame(data, columns=EXPORT_COLUMNS)
        df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
        return df
