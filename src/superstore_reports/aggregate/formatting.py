"""Display formatting for report tables.

Report functions always return raw numbers. Formatting to currency strings
happens here, on a copy, right before a table is shown.
"""
from __future__ import annotations

from typing import Iterable

import pandas as pd


def format_currency(value: float | None, symbol: str = "$") -> str:
    """Format a number as a currency string with two decimals.

    Examples: ``1234.5 -> "$1,234.50"``, ``-3 -> "-$3.00"``. Missing values
    (None/NaN) format as an empty string.
    """
    if value is None or pd.isna(value):
        return ""
    amount = float(value)
    sign = "-" if amount < 0 and round(abs(amount), 2) != 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_report(
    df: pd.DataFrame,
    currency_columns: Iterable[str],
    symbol: str = "$",
) -> pd.DataFrame:
    """Return a copy of `df` with `currency_columns` rendered as strings.

    Columns not present in `df` are ignored.
    """
    out = df.copy()
    for col in currency_columns:
        if col in out.columns:
            out[col] = out[col].map(lambda v: format_currency(v, symbol)).astype(object)
    return out
