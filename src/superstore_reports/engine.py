"""Aggregation engine over the in-memory Superstore orders table.

`AggregationEngine` owns a private, normalized copy of the orders frame and
exposes one method per report. Reports never modify the frame, so a single
engine can serve any number of report calls, in any order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from superstore_reports.aggregate import reports as r
from superstore_reports.models import ORDER_COLUMNS, OrderRecord

log = logging.getLogger(__name__)

_TEXT_COLUMNS = ("order_id", "customer_id", "region", "category", "sub_category", "product_name")
_FLOAT_COLUMNS = ("sales", "profit", "discount")


@dataclass(frozen=True)
class ReportDef:
    """Registry entry for a report.

    Attributes:
        name: Method name on `AggregationEngine` and CLI identifier.
        title: Human-readable heading.
        currency_columns: Columns formatted as currency for display.
    """
    name: str
    title: str
    currency_columns: tuple[str, ...] = ()


REPORTS: tuple[ReportDef, ...] = (
    ReportDef("sales_profit_by_region", "Total Sales and Profit by Region",
              ("total_sales", "total_profit")),
    ReportDef("profit_by_category", "Categories Based on Profit", ("total_profit",)),
    ReportDef("sales_profit_by_sub_category", "Sales and Profit by Sub-Category",
              ("total_sales", "total_profit")),
    ReportDef("margin_by_category", "Profitability vs. Sales for Each Category",
              ("total_sales", "total_profit")),
    ReportDef("monthly_trend", "Monthly Sales Trend Analysis", ("total_sales", "total_profit")),
    ReportDef("profitable_categories", "Profitable Categories", ("total_sales", "total_profit")),
    ReportDef("regional_sales_by_row", "Regional Sales with Window Totals",
              ("sales", "regional_sales")),
    ReportDef("region_category_pivot", "Sales by Category and Region", ()),
    ReportDef("high_volume_customers", "High Volume Customers", ("total_sales",)),
    ReportDef("region_contribution", "Region Sales Contribution Percentage", ("regional_sales",)),
    ReportDef("region_summary", "Region Sales and Profit Summary",
              ("total_sales", "total_profit")),
    ReportDef("customer_lifetime_value", "Customer Sales & Profit Ranking",
              ("lifetime_sales", "lifetime_profit")),
    ReportDef("discount_vs_profit", "Discount Impact on Profitability", ("avg_profit",)),
    ReportDef("yearly_growth", "Yearly Sales Growth", ("total_sales", "previous_year_sales")),
    ReportDef("avg_discount_by_category", "Discount by Category", ()),
    ReportDef("monthly_sales_change", "Monthly Sales Change", ("total_sales", "sales_change")),
)

REPORTS_BY_NAME: dict[str, ReportDef] = {d.name: d for d in REPORTS}


def currency_columns_for(name: str, df: pd.DataFrame) -> tuple[str, ...]:
    """Currency columns of report `name`, including the per-region pivot columns."""
    if name == "region_category_pivot":
        return tuple(c for c in df.columns if c.endswith("_sales"))
    return REPORTS_BY_NAME[name].currency_columns


def normalize_orders(orders: pd.DataFrame) -> pd.DataFrame:
    """Return a typed copy of `orders` restricted to the `OrderRecord` columns.

    The same value rules as `OrderRecord` apply: text fields non-empty after
    stripping, sales >= 0, discount in [0, 1], quantity a positive whole
    number, no missing or infinite numbers.

    Raises:
        ValueError: if a column is missing or any value breaks those rules.
    """
    missing = [c for c in ORDER_COLUMNS if c not in orders.columns]
    if missing:
        raise ValueError(f"orders frame is missing columns: {', '.join(missing)}")

    df = orders.loc[:, list(ORDER_COLUMNS)].copy().reset_index(drop=True)
    bad: dict[str, pd.Series] = {}

    for col in _TEXT_COLUMNS:
        text = df[col].astype(object).map(lambda v: v.strip() if isinstance(v, str) else v)
        df[col] = text
        bad[col] = text.isna() | (text == "")

    df["order_date"] = pd.to_datetime(df["order_date"], errors="coerce")
    bad["order_date"] = df["order_date"].isna()

    for col in _FLOAT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
        bad[col] = ~np.isfinite(df[col])
    bad["sales"] |= df["sales"] < 0
    bad["discount"] |= (df["discount"] < 0) | (df["discount"] > 1)

    quantity = pd.to_numeric(df["quantity"], errors="coerce").astype("float64")
    bad["quantity"] = ~np.isfinite(quantity) | (quantity % 1 != 0) | (quantity <= 0)

    invalid = [c for c in ORDER_COLUMNS if bad[c].any()]
    if invalid:
        raise ValueError(f"orders frame has missing or invalid values in: {', '.join(invalid)}")

    df["quantity"] = quantity.astype("int64")
    return df


class AggregationEngine:
    """Runs Superstore reports against an immutable orders table.

    Args:
        orders: Orders frame with the `OrderRecord` columns.
        profit_threshold: Default threshold for `profitable_categories`.
        high_volume_min_orders: Default cut-off for `high_volume_customers`.
    """

    def __init__(
        self,
        orders: pd.DataFrame,
        profit_threshold: float = r.DEFAULT_PROFIT_THRESHOLD,
        high_volume_min_orders: int = r.DEFAULT_HIGH_VOLUME_MIN_ORDERS,
    ) -> None:
        self._orders = normalize_orders(orders)
        self.profit_threshold = profit_threshold
        self.high_volume_min_orders = high_volume_min_orders
        log.info("Aggregation engine ready with %d order rows", len(self._orders))

    @classmethod
    def from_records(
        cls,
        records: Iterable[OrderRecord | Mapping[str, Any]],
        **kwargs: Any,
    ) -> "AggregationEngine":
        """Build an engine from `OrderRecord` objects or plain dicts.

        Dicts are validated through `OrderRecord` first.
        """
        rows = [
            (rec if isinstance(rec, OrderRecord) else OrderRecord.model_validate(rec)).model_dump()
            for rec in records
        ]
        frame = pd.DataFrame(rows, columns=list(ORDER_COLUMNS))
        return cls(frame, **kwargs)

    @property
    def orders(self) -> pd.DataFrame:
        """A copy of the loaded orders."""
        return self._orders.copy()

    def __len__(self) -> int:
        return len(self._orders)

    # -------------------------
    # Dispatch
    # -------------------------
    def run(self, name: str, **params: Any) -> pd.DataFrame:
        """Run the report called `name`.

        Raises:
            KeyError: if no report has that name.
        """
        if name not in REPORTS_BY_NAME:
            raise KeyError(f"unknown report: {name!r}")
        log.debug("Running report %s", name)
        return getattr(self, name)(**params)

    def run_all(self, names: Sequence[str] | None = None) -> dict[str, pd.DataFrame]:
        """Run several reports (all by default) and return them in registry order."""
        selected = [d.name for d in REPORTS] if names is None else list(names)
        return {name: self.run(name) for name in selected}

    # -------------------------
    # Reports
    # -------------------------
    def sales_profit_by_region(self) -> pd.DataFrame:
        return r.report_sales_profit_by_region(self._orders)

    def profit_by_category(self) -> pd.DataFrame:
        return r.report_profit_by_category(self._orders)

    def sales_profit_by_sub_category(self) -> pd.DataFrame:
        return r.report_sales_profit_by_sub_category(self._orders)

    def margin_by_category(self) -> pd.DataFrame:
        return r.report_margin_by_category(self._orders)

    def monthly_trend(self) -> pd.DataFrame:
        return r.report_monthly_trend(self._orders)

    def profitable_categories(self, threshold: float | None = None) -> pd.DataFrame:
        if threshold is None:
            threshold = self.profit_threshold
        return r.report_profitable_categories(self._orders, threshold)

    def regional_sales_by_row(self) -> pd.DataFrame:
        return r.report_regional_sales_by_row(self._orders)

    def region_category_pivot(self, regions: Sequence[str] | None = None) -> pd.DataFrame:
        return r.report_region_category_pivot(self._orders, regions)

    def high_volume_customers(self, min_orders: int | None = None) -> pd.DataFrame:
        if min_orders is None:
            min_orders = self.high_volume_min_orders
        return r.report_high_volume_customers(self._orders, min_orders)

    def region_contribution(self) -> pd.DataFrame:
        return r.report_region_contribution(self._orders)

    def region_summary(self) -> pd.DataFrame:
        return r.report_region_summary(self._orders)

    def customer_lifetime_value(self, dense: bool = False) -> pd.DataFrame:
        return r.report_customer_lifetime_value(self._orders, dense=dense)

    def discount_vs_profit(self) -> pd.DataFrame:
        return r.report_discount_vs_profit(self._orders)

    def yearly_growth(self) -> pd.DataFrame:
        return r.report_yearly_growth(self._orders)

    def avg_discount_by_category(self) -> pd.DataFrame:
        return r.report_avg_discount_by_category(self._orders)

    def monthly_sales_change(self) -> pd.DataFrame:
        return r.report_monthly_sales_change(self._orders)
