"""Validation utilities for cleaned order rows.

This module validates rows against the Pydantic `OrderRecord` model after
converting pandas missing values and timestamps into native Python types.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

import pandas as pd
from pydantic import ValidationError

from superstore_reports.models import OrderRecord


def _to_native(rec: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in rec.items():
        if v is None or (not isinstance(v, str) and pd.isna(v)):
            out[k] = None
        elif isinstance(v, datetime):
            out[k] = v.date()
        else:
            out[k] = v
    return out


def validate_partition(
    pdf: pd.DataFrame,
) -> tuple[list[dict[str, Any]], list[tuple[int, str]]]:
    """Validate a pandas frame of cleaned order rows using Pydantic.

    Args:
        pdf: Cleaned pandas DataFrame (see `clean_orders_pdf`).

    Returns:
        A tuple of (validated_records, errors) where each error is
        `(row_position, message)` and positions count from 0.
    """
    good: list[dict[str, Any]] = []
    errors: list[tuple[int, str]] = []

    for pos, rec in enumerate(pdf.to_dict(orient="records")):
        try:
            m = OrderRecord.model_validate(_to_native(rec))
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(p) for p in e["loc"]) or "row" for e in exc.errors()
            )
            errors.append((pos, f"invalid fields: {fields}"))
            continue
        good.append(m.model_dump(mode="python"))

    return good, errors
