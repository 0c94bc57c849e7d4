"""Load the Superstore CSV into a validated pandas DataFrame.

The file is read with Dask (all columns as strings), cleaned partition-wise,
materialized to pandas and validated row by row. The result is the frame
`AggregationEngine` is built from.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import pandas as pd
import dask.dataframe as dd

from superstore_reports.clean.transform import clean_orders_ddf, header_mapping
from superstore_reports.clean.validate import validate_partition
from superstore_reports.models import ORDER_COLUMNS

log = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 5


class OrderLoadError(ValueError):
    """Raised when the order file is missing columns or has malformed rows."""


def records_to_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    """Build a typed orders DataFrame from validated record dicts."""
    pdf = pd.DataFrame(records, columns=list(ORDER_COLUMNS))
    pdf["order_date"] = pd.to_datetime(pdf["order_date"])
    for col in ("sales", "profit", "discount"):
        pdf[col] = pdf[col].astype("float64")
    pdf["quantity"] = pdf["quantity"].astype("int64")
    return pdf


def validate_orders(pdf: pd.DataFrame, strict: bool = True) -> pd.DataFrame:
    """Validate cleaned rows and return the typed orders frame.

    Args:
        pdf: Output of the cleaning step.
        strict: Fail on any malformed row (default). When False, malformed
            rows are dropped and a warning is logged.

    Raises:
        OrderLoadError: in strict mode, if any row fails validation.
    """
    good, errors = validate_partition(pdf)

    if errors:
        sample = "; ".join(
            f"data row {pos + 1}: {msg}" for pos, msg in errors[:MAX_REPORTED_ERRORS]
        )
        if strict:
            raise OrderLoadError(f"{len(errors)} malformed order rows ({sample})")
        log.warning("Dropped %d malformed order rows (%s)", len(errors), sample)

    return records_to_frame(good)


def load_orders_csv(
    path: Path,
    encoding: str = "latin-1",
    strict: bool = True,
) -> pd.DataFrame:
    """Read, clean and validate the Superstore CSV.

    Args:
        path: CSV file path.
        encoding: File encoding (the public dataset ships as latin-1).
        strict: See `validate_orders`.

    Returns:
        pandas DataFrame with the `OrderRecord` columns, in file order.

    Raises:
        OrderLoadError: if required columns are missing or rows are malformed.
    """
    log.info("Reading orders from %s", path)

    dd_mod = cast(Any, dd)
    ddf = dd_mod.read_csv(
        str(path),
        dtype=str,
        encoding=encoding,
        keep_default_na=False,
        blocksize=None,
    )

    mapped = set(header_mapping(ddf.columns).values())
    missing = [c for c in ORDER_COLUMNS if c not in mapped]
    if missing:
        raise OrderLoadError(f"{path} is missing required columns: {', '.join(missing)}")

    pdf = clean_orders_ddf(ddf).compute().reset_index(drop=True)
    orders = validate_orders(pdf, strict=strict)

    log.info("Loaded %d order rows from %s", len(orders), path)
    return orders
