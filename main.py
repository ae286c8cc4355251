"""
main.py
-------
Entry point for the product stock API.

Responsibilities:
    - Validate configuration and build the connection provider.
    - Check the query catalog against the row mappings.
    - Create the database schema if needed.
    - Build the FastAPI app and serve it with uvicorn.
"""

import sys

import uvicorn

from api.app import create_app
from config import API_HOST, API_PORT, DATABASE_URL, INIT_SCHEMA
from db.connection import ConnectionProvider
from db.init_db import create_tables
from db.queries import CATALOG
from db.row_mapper import validate_catalog
from exceptions import ConfigurationError
from repositories.product_repo import ProductRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Initialize and run the API."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    try:
        provider = ConnectionProvider(DATABASE_URL)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    validate_catalog(CATALOG)
    if INIT_SCHEMA:
        create_tables(provider)

    # ── 2. Build the HTTP application ─────────────────────
    app = create_app(ProductRepository(provider))

    # ── 3. Serve ──────────────────────────────────────────
    logger.info(f"Product API listening on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT)
    logger.info("Product API stopped.")


if __name__ == "__main__":
    main()
