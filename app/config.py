# /app/config.py

"""
Runtime configuration for the catalog backend.

Values come from the process environment, with a local `.env` file loaded
first for development. Every setting has a default that is safe for running
the service locally against a SQLite file.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# --- Database ---
# The second argument is the default used for local development.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./catalog.db")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- HTTP ---
def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]

CORS_ORIGINS = _split_origins(os.getenv("CORS_ORIGINS", "*"))

# All canonical entity locations live under this prefix.
CATALOG_PREFIX = "/catalog"
