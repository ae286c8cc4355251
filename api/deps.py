"""
api/deps.py
-----------
FastAPI dependency providers.
"""

from fastapi import Depends, Request

from repositories.product_repo import ProductRepository
from services.export_service import ExportService


def get_repository(request: Request) -> ProductRepository:
    """Repository built once at startup and stored on the app."""
    return request.app.state.repository


def get_export_service(repo: ProductRepository = Depends(get_repository)) -> ExportService:
    return ExportService(repo)
