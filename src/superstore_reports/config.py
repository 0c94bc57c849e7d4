"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables (optionally from a `.env` file at the project
root) and validates the numeric report thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

@dataclass(frozen=True)
class Settings:
    """Container for report configuration read from the environment.

    Attributes:
        orders_csv: Path to the Superstore CSV file.
        csv_encoding: Text encoding of the CSV file.
        currency_symbol: Symbol used when formatting currency for display.
        profit_threshold: Minimum total profit for the profitable categories report.
        high_volume_min_orders: Order line count a customer must exceed to be high volume.
        log_path: File that log output is mirrored to.
    """
    orders_csv: Path
    csv_encoding: str
    currency_symbol: str
    profit_threshold: float
    high_volume_min_orders: int
    log_path: Path


def _env_number(name: str, default: str, kind: type) -> float | int:
    raw = os.getenv(name, default).strip()
    try:
        return kind(raw)
    except ValueError:
        raise RuntimeError(
            f"{name} must be a valid {kind.__name__} (got {raw!r})."
        ) from None


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a numeric setting cannot be parsed or is negative.
    """
    orders_csv = Path(os.getenv("SUPERSTORE_CSV", "data/superstore.csv"))
    csv_encoding = os.getenv("SUPERSTORE_CSV_ENCODING", "latin-1").strip() or "latin-1"
    currency_symbol = os.getenv("CURRENCY_SYMBOL", "$")
    profit_threshold = float(_env_number("PROFIT_THRESHOLD", "10000", float))
    high_volume_min_orders = int(_env_number("HIGH_VOLUME_MIN_ORDERS", "10", int))
    log_path = Path(os.getenv("LOG_PATH", "logs/reports.log"))

    if high_volume_min_orders < 0:
        raise RuntimeError("HIGH_VOLUME_MIN_ORDERS must not be negative.")

    return Settings(
        orders_csv=orders_csv,
        csv_encoding=csv_encoding,
        currency_symbol=currency_symbol,
        profit_threshold=profit_threshold,
        high_volume_min_orders=high_volume_min_orders,
        log_path=log_path,
    )
