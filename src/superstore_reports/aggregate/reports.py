"""Superstore report functions.

Each function takes the orders DataFrame (columns as in `OrderRecord`) and
returns a new report DataFrame. Monetary columns hold raw floats; display
formatting happens only in `aggregate.formatting`.

Expectations:
- Input: pandas DataFrame with `order_id`, `customer_id`, `order_date`
  (datetime64), `region`, `category`, `sub_category`, `product_name`,
  `sales`, `profit`, `discount`, `quantity`.
- Outputs: DataFrames with the columns documented on each function.
- An empty input gives an empty output with the same columns.
"""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from superstore_reports.aggregate.toolkit import (
    group_aggregate,
    lag,
    lead,
    month_key,
    order_rows,
    rank_desc,
    safe_ratio,
    share_of_total,
    window_sum,
    year_key,
)

KNOWN_REGIONS = ("East", "West", "South", "Central")

DEFAULT_PROFIT_THRESHOLD = 10_000.0
DEFAULT_HIGH_VOLUME_MIN_ORDERS = 10


# =========================================================
# REGION / CATEGORY TOTALS
# =========================================================

def report_sales_profit_by_region(df: pd.DataFrame) -> pd.DataFrame:
    """Total sales and profit per region, highest sales first.

    Returns:
        DataFrame with columns: `region`, `total_sales`, `total_profit`.
    """
    out = group_aggregate(
        df, "region", total_sales=("sales", "sum"), total_profit=("profit", "sum")
    )
    return order_rows(out, "total_sales", ascending=False)


def report_profit_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Total profit per category, most profitable first.

    Returns:
        DataFrame with columns: `category`, `total_profit`.
    """
    out = group_aggregate(df, "category", total_profit=("profit", "sum"))
    return order_rows(out, "total_profit", ascending=False)


def report_sales_profit_by_sub_category(df: pd.DataFrame) -> pd.DataFrame:
    """Total sales and profit per sub-category, highest sales first.

    Returns:
        DataFrame with columns: `sub_category`, `total_sales`, `total_profit`.
    """
    out = group_aggregate(
        df, "sub_category", total_sales=("sales", "sum"), total_profit=("profit", "sum")
    )
    return order_rows(out, "total_sales", ascending=False)


def report_margin_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Profit margin percentage per category.

    `profit_margin_pct` is ``100 * total_profit / total_sales`` rounded to two
    decimals; a category with zero sales gets NaN and sorts last.

    Returns:
        DataFrame with columns: `category`, `total_sales`, `total_profit`,
        `profit_margin_pct`.
    """
    out = group_aggregate(
        df, "category", total_sales=("sales", "sum"), total_profit=("profit", "sum")
    )
    out = out.assign(profit_margin_pct=safe_ratio(out["total_profit"], out["total_sales"]))
    return order_rows(out, "profit_margin_pct", ascending=False)


def report_profitable_categories(
    df: pd.DataFrame,
    threshold: float = DEFAULT_PROFIT_THRESHOLD,
) -> pd.DataFrame:
    """Categories whose total profit exceeds `threshold` (strictly greater).

    Returns:
        DataFrame with columns: `category`, `total_sales`, `total_profit`,
        in category order.
    """
    out = group_aggregate(
        df, "category", total_sales=("sales", "sum"), total_profit=("profit", "sum")
    )
    return out[out["total_profit"] > threshold].reset_index(drop=True)


def report_regional_sales_by_row(df: pd.DataFrame) -> pd.DataFrame:
    """Every order line with its region's total sales alongside.

    Rows are not collapsed; they are ordered by region then category, keeping
    file order within ties.

    Returns:
        DataFrame with columns: `region`, `category`, `sales`, `regional_sales`.
    """
    rows = window_sum(df[["region", "category", "sales"]], "region", "sales", "regional_sales")
    return order_rows(rows, ["region", "category"])


def _pivot_columns(observed: Sequence[str]) -> list[str]:
    known = [r for r in KNOWN_REGIONS if r in observed]
    return known + sorted(r for r in set(observed) if r not in KNOWN_REGIONS)


def report_region_category_pivot(
    df: pd.DataFrame,
    regions: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Sales per category with one column per region.

    Args:
        df: Orders frame.
        regions: Region columns to produce, in order. Defaults to the regions
            present in `df` (East, West, South, Central first, any others
            appended alphabetically). A listed region with no rows gives a
            column of zeros.

    Returns:
        DataFrame with `category` followed by one `<region>_sales` column per
        region (lower-cased, spaces as underscores), categories ascending.

    Raises:
        ValueError: If two regions map to the same column name.
    """
    cols = list(regions) if regions is not None else _pivot_columns(list(df["region"].unique()))
    names = [f"{str(reg).strip().lower().replace(' ', '_')}_sales" for reg in cols]
    if len(set(names)) != len(names):
        clashes = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"regions map to duplicate pivot columns: {', '.join(clashes)}")

    wide = (
        df.pivot_table(
            index="category",
            columns="region",
            values="sales",
            aggfunc="sum",
            fill_value=0.0,
        )
        if not df.empty
        else pd.DataFrame(index=pd.Index([], name="category", dtype=object))
    )
    wide = wide.reindex(columns=cols, fill_value=0.0).astype("float64")
    wide.columns = names
    return wide.sort_index().reset_index()


def report_region_contribution(df: pd.DataFrame) -> pd.DataFrame:
    """Each region's share of dataset-wide sales.

    The denominator is the grand total over every row, computed once.

    Returns:
        DataFrame with columns: `region`, `regional_sales`, `sales_pct`
        (rounded to two decimals), largest share first.
    """
    grand_total = float(df["sales"].sum())
    out = group_aggregate(df, "region", regional_sales=("sales", "sum"))
    out = share_of_total(out, "regional_sales", "sales_pct", grand_total=grand_total)
    return order_rows(out, "sales_pct", ascending=False)


def report_region_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Region summary built as a two-step (summarise, then order) query.

    Same rows and order as `report_sales_profit_by_region`; the ordering is
    applied to the numeric totals of the intermediate summary.

    Returns:
        DataFrame with columns: `region`, `total_sales`, `total_profit`.
    """
    summary = df.groupby("region", sort=False)[["sales", "profit"]].sum()
    summary = summary.rename(columns={"sales": "total_sales", "profit": "total_profit"})
    return order_rows(summary.reset_index(), ["total_sales", "region"], ascending=[False, True])


# =========================================================
# CUSTOMERS
# =========================================================

def report_high_volume_customers(
    df: pd.DataFrame,
    min_orders: int = DEFAULT_HIGH_VOLUME_MIN_ORDERS,
) -> pd.DataFrame:
    """Customers with more than `min_orders` order lines.

    `number_orders` counts line items carrying an order id, so an order with
    three products counts three times.

    Returns:
        DataFrame with columns: `customer_id`, `number_orders`, `total_sales`,
        highest sales first.
    """
    out = group_aggregate(
        df, "customer_id", number_orders=("order_id", "count"), total_sales=("sales", "sum")
    )
    out = out[out["number_orders"] > min_orders].astype({"number_orders": "int64"})
    return order_rows(out, "total_sales", ascending=False)


def report_customer_lifetime_value(df: pd.DataFrame, dense: bool = False) -> pd.DataFrame:
    """Lifetime sales and profit per customer with a sales rank.

    Ranked on the numeric lifetime sales, descending, with lifetime profit
    (descending) breaking ties. Customers tied on both share a rank.

    Args:
        df: Orders frame.
        dense: Use dense ranking instead of standard competition ranking.

    Returns:
        DataFrame with columns: `customer_id`, `lifetime_sales`,
        `lifetime_profit`, `sales_rank`, in rank order.
    """
    out = group_aggregate(
        df, "customer_id", lifetime_sales=("sales", "sum"), lifetime_profit=("profit", "sum")
    )
    return rank_desc(out, ["lifetime_sales", "lifetime_profit"], "sales_rank", dense=dense)


# =========================================================
# DISCOUNTS
# =========================================================

def report_discount_vs_profit(df: pd.DataFrame) -> pd.DataFrame:
    """Average line profit at each exact discount level.

    Returns:
        DataFrame with columns: `discount`, `avg_profit`, discount ascending.
    """
    return group_aggregate(df, "discount", avg_profit=("profit", "mean"))


def report_avg_discount_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Average line discount per category, rounded to two decimals.

    Returns:
        DataFrame with columns: `category`, `avg_discount`, highest first.
    """
    out = group_aggregate(df, "category", avg_discount=("discount", "mean"))
    out = out.assign(avg_discount=out["avg_discount"].round(2))
    return order_rows(out, "avg_discount", ascending=False)


# =========================================================
# TIME SERIES
# =========================================================

def report_monthly_trend(df: pd.DataFrame) -> pd.DataFrame:
    """Total sales and profit per calendar month.

    Returns:
        DataFrame with columns: `month` (``YYYY-MM``), `total_sales`,
        `total_profit`, month ascending.
    """
    x = df.assign(month=month_key(df["order_date"]))
    return group_aggregate(
        x, "month", total_sales=("sales", "sum"), total_profit=("profit", "sum")
    )


def report_yearly_growth(df: pd.DataFrame) -> pd.DataFrame:
    """Year-over-year sales growth.

    The first year has `previous_year_sales` 0.0 and `yoy_growth_pct` NaN;
    any year following a zero-sales year also gets NaN growth.

    Returns:
        DataFrame with columns: `year`, `total_sales`, `previous_year_sales`,
        `yoy_growth_pct` (rounded to two decimals), year ascending.
    """
    x = df.assign(year=year_key(df["order_date"]))
    out = group_aggregate(x, "year", total_sales=("sales", "sum"))
    out = lag(out, "total_sales", "previous_year_sales")
    growth = safe_ratio(out["total_sales"] - out["previous_year_sales"], out["previous_year_sales"])
    return out.assign(
        previous_year_sales=out["previous_year_sales"].fillna(0.0),
        yoy_growth_pct=growth,
    )


def report_monthly_sales_change(df: pd.DataFrame) -> pd.DataFrame:
    """Month-to-month sales change.

    `sales_change` is next month's total minus this month's; the last month
    has NaN.

    Returns:
        DataFrame with columns: `month`, `total_sales`, `sales_change`,
        month ascending.
    """
    x = df.assign(month=month_key(df["order_date"]))
    out = group_aggregate(x, "month", total_sales=("sales", "sum"))
    out = lead(out, "total_sales", "next_sales")
    return out.assign(sales_change=out["next_sales"] - out["total_sales"])[
        ["month", "total_sales", "sales_change"]
    ]
