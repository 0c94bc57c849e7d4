"""Cleaning and normalization utilities.

This module contains transformations that are applied partition-wise using
Dask. The output is a Dask DataFrame whose schema is stable and suitable for
Pydantic validation against `OrderRecord`.
"""
from __future__ import annotations

import re
import logging
from typing import Any

import pandas as pd

from superstore_reports.models import ORDER_COLUMNS

log = logging.getLogger(__name__)

TEXT_COLUMNS = (
    "order_id",
    "customer_id",
    "region",
    "category",
    "sub_category",
    "product_name",
)
NUMERIC_COLUMNS = ("sales", "profit", "discount", "quantity")

_HEADER_KEY_RE = re.compile(r"[\s_\-]+")
_HEADER_ALIASES = {_HEADER_KEY_RE.sub("", c).lower(): c for c in ORDER_COLUMNS}

# 1,234 or $1,234,567.89; anything else with a comma is left to fail parsing
_THOUSANDS_PATTERN = r"^-?\$?\d{1,3}(?:,\d{3})+(?:\.\d+)?$"


def normalize_header(name: str) -> str | None:
    """Map a source header to its `OrderRecord` field name.

    Case, whitespace, hyphens and underscores are ignored, so `Sub-Category`,
    `SubCategory` and `sub_category` all map to `sub_category`.

    Returns:
        The field name, or ``None`` when the header is not part of the schema.
    """
    return _HEADER_ALIASES.get(_HEADER_KEY_RE.sub("", str(name)).lower())


def header_mapping(columns: Any) -> dict[str, str]:
    """Return `{source_header: field_name}` for every recognised header."""
    mapping: dict[str, str] = {}
    for col in columns:
        field = normalize_header(col)
        if field is not None and field not in mapping.values():
            mapping[col] = field
    return mapping


def _as_text(s: pd.Series) -> pd.Series:
    """Return `s` as stripped text with inner whitespace collapsed; missing -> ''."""
    return (
        s.astype(object)
        .where(s.notna(), "")
        .astype(str)
        .str.strip()
        .str.replace(r"\s+", " ", regex=True)
    )


def clean_orders_pdf(pdf: pd.DataFrame) -> pd.DataFrame:
    """Clean one pandas partition of raw Superstore rows.

    Unknown columns are dropped; missing schema columns are added empty so
    the validator reports them per row. Unparseable values become missing,
    never a substitute value.
    """
    pdf = pdf.rename(columns=header_mapping(pdf.columns))
    pdf = pdf.reindex(columns=list(ORDER_COLUMNS))

    # -----------------------------
    # Normalize text
    # -----------------------------
    for col in TEXT_COLUMNS:
        text = _as_text(pdf[col])
        pdf[col] = text.astype(object).where(text != "", None)

    # -----------------------------
    # Standardize date
    # -----------------------------
    pdf["order_date"] = pd.to_datetime(
        _as_text(pdf["order_date"]), errors="coerce", format="mixed"
    )

    # -----------------------------
    # Numbers
    # -----------------------------
    for col in NUMERIC_COLUMNS:
        text = _as_text(pdf[col])
        grouped = text.str.match(_THOUSANDS_PATTERN)
        raw = text.where(~grouped, text.str.replace(",", "", regex=False))
        raw = raw.str.replace("$", "", regex=False)
        pdf[col] = pd.to_numeric(raw, errors="coerce").astype("float64")

    return pdf


def clean_orders_ddf(ddf: Any) -> Any:
    """Clean raw Superstore rows.

    Performs header normalization, text trimming, date parsing and numeric
    parsing partition by partition.

    Returns:
        Transformed Dask DataFrame with exactly the `OrderRecord` columns.
    """
    log.info("Starting clean_orders_ddf transformation")

    meta = clean_orders_pdf(ddf._meta.copy())
    return ddf.map_partitions(clean_orders_pdf, meta=meta)
