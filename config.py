"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
# No default: a missing connection string is fatal at startup.
DATABASE_URL: str = os.getenv("DATABASE_URL", "")

# Create tables on startup when they are missing.
INIT_SCHEMA: bool = os.getenv("INIT_SCHEMA", "true").strip().lower() in ("1", "true", "yes")

# ── Inventory ─────────────────────────────────────────────
LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))

# ── HTTP API ──────────────────────────────────────────────
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
