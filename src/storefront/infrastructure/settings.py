"""Runtime configuration read from the environment (and an optional .env)."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Defaults to <repo root>/data when installed in editable mode.
DATA_DIR = Path(os.getenv("STOREFRONT_DATA_DIR", Path(__file__).resolve().parents[3] / "data"))
STOCK_DB = Path(os.getenv("STOREFRONT_STOCK_DB", DATA_DIR / "stock.sqlite3"))
LOG_LEVEL = os.getenv("STOREFRONT_LOG_LEVEL", "WARNING")
PAYMENT_METHODS = [
    m.strip() for m in os.getenv("STOREFRONT_PAYMENT_METHODS", "cash,processor").split(",") if m.strip()
]
SQLITE_TIMEOUT_SECONDS = float(os.getenv("STOREFRONT_SQLITE_TIMEOUT", "5"))
