from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from superstore_reports.engine import (
    REPORTS,
    AggregationEngine,
    currency_columns_for,
    normalize_orders,
)
from superstore_reports.models import ORDER_COLUMNS, OrderRecord

from conftest import order_row

EXPECTED_COLUMNS = {
    "sales_profit_by_region": ["region", "total_sales", "total_profit"],
    "profit_by_category": ["category", "total_profit"],
    "sales_profit_by_sub_category": ["sub_category", "total_sales", "total_profit"],
    "margin_by_category": ["category", "total_sales", "total_profit", "profit_margin_pct"],
    "monthly_trend": ["month", "total_sales", "total_profit"],
    "profitable_categories": ["category", "total_sales", "total_profit"],
    "regional_sales_by_row": ["region", "category", "sales", "regional_sales"],
    "region_category_pivot": ["category"],
    "high_volume_customers": ["customer_id", "number_orders", "total_sales"],
    "region_contribution": ["region", "regional_sales", "sales_pct"],
    "region_summary": ["region", "total_sales", "total_profit"],
    "customer_lifetime_value": ["customer_id", "lifetime_sales", "lifetime_profit", "sales_rank"],
    "discount_vs_profit": ["discount", "avg_profit"],
    "yearly_growth": ["year", "total_sales", "previous_year_sales", "yoy_growth_pct"],
    "avg_discount_by_category": ["category", "avg_discount"],
    "monthly_sales_change": ["month", "total_sales", "sales_change"],
}


def test_registry_has_sixteen_unique_reports() -> None:
    names = [d.name for d in REPORTS]
    assert len(names) == 16
    assert set(names) == set(EXPECTED_COLUMNS)


def test_empty_dataset_gives_empty_reports(make_orders) -> None:
    engine = AggregationEngine(make_orders())
    assert len(engine) == 0
    results = engine.run_all()
    assert list(results) == [d.name for d in REPORTS]
    for name, df in results.items():
        assert df.empty, name
        assert list(df.columns) == EXPECTED_COLUMNS[name], name


def test_run_all_is_idempotent(sample_orders) -> None:
    engine = AggregationEngine(sample_orders)
    first = engine.run_all()
    second = engine.run_all()
    for name in first:
        pd.testing.assert_frame_equal(first[name], second[name])


def test_run_all_does_not_change_dataset(sample_orders) -> None:
    engine = AggregationEngine(sample_orders)
    before = engine.orders
    engine.run_all()
    pd.testing.assert_frame_equal(engine.orders, before)


def test_orders_property_is_a_copy(sample_orders) -> None:
    engine = AggregationEngine(sample_orders)
    view = engine.orders
    view.loc[0, "sales"] = -1.0
    assert engine.orders.loc[0, "sales"] == 100.0


def test_engine_copies_input_frame(sample_orders) -> None:
    frame = sample_orders.copy()
    engine = AggregationEngine(frame)
    frame.loc[0, "sales"] = 1e9
    assert engine.sales_profit_by_region()["total_sales"].sum() == pytest.approx(1200.0)


def test_run_by_name_with_params(sample_orders) -> None:
    engine = AggregationEngine(sample_orders, profit_threshold=30.0)
    assert list(engine.run("profitable_categories")["category"]) == ["Office Supplies", "Technology"]
    assert list(engine.run("profitable_categories", threshold=50.0)["category"]) == ["Technology"]
    assert list(engine.run("high_volume_customers", min_orders=2)["customer_id"]) == ["C1"]
    assert list(engine.run("customer_lifetime_value", dense=True)["sales_rank"]) == [1, 2, 3]


def test_run_unknown_report_raises(sample_orders) -> None:
    with pytest.raises(KeyError):
        AggregationEngine(sample_orders).run("orders")


def test_from_records_accepts_models_and_dicts() -> None:
    engine = AggregationEngine.from_records([
        OrderRecord.model_validate(order_row(region="West", sales=200.0, profit=20.0)),
        order_row(region="East", sales=150.0, profit=5.0),
    ])
    out = engine.sales_profit_by_region()
    assert list(out["region"]) == ["West", "East"]


def test_normalize_orders_rejects_missing_columns() -> None:
    pdf = pd.DataFrame([order_row()]).drop(columns=["discount"])
    with pytest.raises(ValueError, match="discount"):
        normalize_orders(pdf)


def test_normalize_orders_rejects_missing_values() -> None:
    pdf = pd.DataFrame([order_row(), order_row(order_date="not a date")])
    with pytest.raises(ValueError, match="order_date"):
        normalize_orders(pdf)


@pytest.mark.parametrize(
    "overrides, column",
    [
        ({"quantity": 2.7}, "quantity"),
        ({"quantity": 0}, "quantity"),
        ({"sales": -50.0}, "sales"),
        ({"discount": 3.0}, "discount"),
        ({"discount": -0.1}, "discount"),
        ({"region": ""}, "region"),
        ({"customer_id": "   "}, "customer_id"),
        ({"profit": float("inf")}, "profit"),
    ],
)
def test_normalize_orders_rejects_out_of_range_values(overrides: dict, column: str) -> None:
    pdf = pd.DataFrame([order_row(), order_row(**overrides)])
    with pytest.raises(ValueError, match=column):
        AggregationEngine(pdf)


def test_normalize_orders_strips_text() -> None:
    out = normalize_orders(pd.DataFrame([order_row(region="  West ", quantity=2.0)]))
    assert out.loc[0, "region"] == "West"
    assert out.loc[0, "quantity"] == 2


def test_normalize_orders_types() -> None:
    pdf = pd.DataFrame([order_row(sales="12.5", quantity="3", order_date=date(2017, 2, 1))])
    pdf["extra"] = "x"
    out = normalize_orders(pdf)
    assert list(out.columns) == list(ORDER_COLUMNS)
    assert out.loc[0, "sales"] == 12.5
    assert out.loc[0, "quantity"] == 3
    assert out.loc[0, "order_date"] == pd.Timestamp("2017-02-01")


def test_pivot_currency_columns(sample_orders) -> None:
    df = AggregationEngine(sample_orders).region_category_pivot()
    assert currency_columns_for("region_category_pivot", df) == (
        "east_sales", "west_sales", "south_sales", "central_sales",
    )
    assert currency_columns_for("yearly_growth", df) == ("total_sales", "previous_year_sales")
