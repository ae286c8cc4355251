"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import ConnectionProvider
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Categories: read-only reference data for products
CREATE TABLE IF NOT EXISTS Categories (
    Id              SERIAL PRIMARY KEY,
    Name            VARCHAR(100) NOT NULL CHECK (Name <> '')
);

-- Products: the stocked items managed by the service
CREATE TABLE IF NOT EXISTS Products (
    Id              SERIAL PRIMARY KEY,
    Name            VARCHAR(200) NOT NULL CHECK (Name <> ''),
    Price           NUMERIC(12,2) NOT NULL CHECK (Price >= 0),
    Stock           INT NOT NULL DEFAULT 0 CHECK (Stock >= 0),
    CreatedAt       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CategoryId      INT REFERENCES Categories(Id) ON DELETE SET NULL
);

-- Indexes for the ordered listings
CREATE INDEX IF NOT EXISTS idx_products_name ON Products(Name);
CREATE INDEX IF NOT EXISTS idx_products_stock ON Products(Stock);
"""


def create_tables(provider: ConnectionProvider) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        provider: Source of the connection to run the DDL on.
    """
    try:
        with provider.create_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from config import DATABASE_URL
    create_tables(ConnectionProvider(DATABASE_URL))
    print("Database schema created successfully.")
