"""Reusable tabular aggregation primitives.

Every report in `reports.py` is a short composition of the helpers below.
All helpers are pure: they return new pandas objects and never modify the
frame they are given.

Conventions:
- Grouped outputs are flat DataFrames (group keys as ordinary columns).
- Ratios with a zero denominator are NaN, never an exception.
- Orderings are stable and put NaN last.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd


def group_aggregate(
    df: pd.DataFrame,
    by: str | list[str],
    **aggs: tuple[str, str],
) -> pd.DataFrame:
    """Group `df` by `by` and compute named aggregates.

    Args:
        df: Input frame.
        by: Grouping column(s).
        **aggs: ``output_name=(column, func)`` pairs, as in pandas named
            aggregation (e.g. ``total_sales=("sales", "sum")``).

    Returns:
        DataFrame with the group keys followed by the aggregate columns,
        sorted by the group keys. Empty input gives an empty frame with the
        same columns.
    """
    keys = [by] if isinstance(by, str) else list(by)
    out = df.groupby(keys, sort=True, dropna=False).agg(**aggs).reset_index()
    return out[keys + list(aggs)]


def window_sum(
    df: pd.DataFrame,
    partition_by: str | list[str],
    column: str,
    name: str,
) -> pd.DataFrame:
    """Attach the per-partition sum of `column` to every row as `name`.

    Row count and row order are preserved (SQL ``SUM(..) OVER (PARTITION BY ..)``).
    """
    totals = df.groupby(partition_by, sort=False, dropna=False)[column].transform("sum")
    return df.assign(**{name: totals.astype("float64")})


def safe_ratio(
    numerator: pd.Series,
    denominator: pd.Series | float,
    scale: float = 100.0,
    ndigits: int | None = 2,
) -> pd.Series:
    """Return ``scale * numerator / denominator`` element-wise.

    A zero (or missing) denominator yields NaN for that element.
    """
    den = pd.Series(denominator, index=numerator.index, dtype="float64")
    num = numerator.astype("float64")
    ratio = (num * scale / den.where(den != 0)).astype("float64")
    if ndigits is not None:
        ratio = ratio.round(ndigits)
    return ratio


def share_of_total(
    df: pd.DataFrame,
    column: str,
    name: str,
    ndigits: int | None = 2,
    grand_total: float | None = None,
) -> pd.DataFrame:
    """Attach each row's percentage share of the column total as `name`.

    Args:
        df: Frame of already-aggregated rows.
        column: Measure column.
        name: Output column name.
        ndigits: Rounding for the percentage (None keeps full precision).
        grand_total: Denominator. Defaults to the sum of `column` over `df`;
            pass the dataset-wide total when `df` is a filtered subset.
    """
    total = float(df[column].sum()) if grand_total is None else float(grand_total)
    return df.assign(**{name: safe_ratio(df[column], total, ndigits=ndigits)})


def rank_desc(
    df: pd.DataFrame,
    by: Sequence[str],
    name: str,
    dense: bool = False,
) -> pd.DataFrame:
    """Rank rows by the `by` columns, all descending.

    Rows are equal (tied) only when every `by` value matches. With
    ``dense=False`` this is standard competition ranking (1, 2, 2, 4); with
    ``dense=True`` no gaps are left after ties (1, 2, 2, 3).

    Returns:
        Copy of `df` sorted by rank, with an int64 `name` column.
    """
    cols = list(by)
    ordered = order_rows(df, cols, ascending=False)
    if ordered.empty:
        return ordered.assign(**{name: pd.Series(dtype="int64")})

    changed = ordered[cols].ne(ordered[cols].shift()).any(axis=1).to_numpy()
    if dense:
        ranks = np.cumsum(changed)
    else:
        positions = np.arange(1, len(ordered) + 1)
        ranks = pd.Series(np.where(changed, positions, np.nan)).ffill().to_numpy()
    return ordered.assign(**{name: ranks.astype("int64")})


def lag(df: pd.DataFrame, column: str, name: str, periods: int = 1) -> pd.DataFrame:
    """Attach the value of `column` `periods` rows earlier as `name` (NaN at the start).

    `df` must already be in sequence order.
    """
    return df.assign(**{name: df[column].shift(periods).astype("float64")})


def lead(df: pd.DataFrame, column: str, name: str, periods: int = 1) -> pd.DataFrame:
    """Attach the value of `column` `periods` rows later as `name` (NaN at the end)."""
    return df.assign(**{name: df[column].shift(-periods).astype("float64")})


def month_key(dates: pd.Series) -> pd.Series:
    """Truncate dates to a ``YYYY-MM`` string key (sorts chronologically)."""
    return pd.to_datetime(dates).dt.strftime("%Y-%m")


def year_key(dates: pd.Series) -> pd.Series:
    """Return the calendar year of each date as int64."""
    return pd.to_datetime(dates).dt.year.astype("int64")


def order_rows(
    df: pd.DataFrame,
    by: str | list[str],
    ascending: bool | list[bool] = True,
) -> pd.DataFrame:
    """Stable sort with NaN last and a fresh 0..n-1 index."""
    return df.sort_values(
        by, ascending=ascending, kind="mergesort", na_position="last"
    ).reset_index(drop=True)
