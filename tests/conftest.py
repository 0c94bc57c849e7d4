from __future__ import annotations

from datetime import date
from typing import Any, Callable

import pandas as pd
import pytest

from superstore_reports.engine import normalize_orders
from superstore_reports.models import ORDER_COLUMNS


def order_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "order_id": "CA-2016-100001",
        "customer_id": "AA-10001",
        "order_date": date(2016, 1, 10),
        "region": "East",
        "category": "Furniture",
        "sub_category": "Chairs",
        "product_name": "Office Chair",
        "sales": 100.0,
        "profit": 10.0,
        "discount": 0.0,
        "quantity": 1,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_orders() -> Callable[..., pd.DataFrame]:
    """Factory: each keyword dict overrides a default order row."""
    def _make(*rows: dict[str, Any]) -> pd.DataFrame:
        if not rows:
            return normalize_orders(pd.DataFrame(columns=list(ORDER_COLUMNS)))
        return normalize_orders(pd.DataFrame([order_row(**r) for r in rows]))
    return _make


@pytest.fixture
def sample_orders(make_orders: Callable[..., pd.DataFrame]) -> pd.DataFrame:
    return make_orders(
        dict(order_id="O1", customer_id="C1", order_date=date(2016, 1, 10), region="East",
             category="Furniture", sub_category="Chairs", sales=100.0, profit=10.0, discount=0.0),
        dict(order_id="O1", customer_id="C1", order_date=date(2016, 1, 10), region="East",
             category="Office Supplies", sub_category="Paper", sales=50.0, profit=-5.0, discount=0.2),
        dict(order_id="O2", customer_id="C2", order_date=date(2016, 2, 15), region="West",
             category="Technology", sub_category="Phones", sales=200.0, profit=20.0, discount=0.0),
        dict(order_id="O3", customer_id="C3", order_date=date(2017, 1, 20), region="South",
             category="Furniture", sub_category="Tables", sales=300.0, profit=-30.0, discount=0.2),
        dict(order_id="O4", customer_id="C2", order_date=date(2017, 3, 5), region="Central",
             category="Technology", sub_category="Phones", sales=400.0, profit=80.0, discount=0.1),
        dict(order_id="O5", customer_id="C1", order_date=date(2017, 3, 25), region="West",
             category="Office Supplies", sub_category="Binders", sales=150.0, profit=45.0, discount=0.1),
    )


SUPERSTORE_HEADER = (
    "Row ID,Order ID,Order Date,Ship Date,Ship Mode,Customer ID,Segment,Region,"
    "Product ID,Category,Sub-Category,Product Name,Sales,Quantity,Discount,Profit"
)


@pytest.fixture
def superstore_csv(tmp_path: Any) -> Any:
    lines = [
        SUPERSTORE_HEADER,
        '1,CA-2016-152156,11/8/2016,11/11/2016,Second Class,CG-12520,Consumer,South,'
        'FUR-BO-10001798,Furniture,Bookcases,"Bush Somerset Collection Bookcase",261.96,2,0,41.9136',
        '2,CA-2016-152156,11/8/2016,11/11/2016,Second Class,CG-12520,Consumer,South,'
        'FUR-CH-10000454,Furniture,Chairs,"Hon Deluxe Fabric Chairs, Black",731.94,3,0,219.582',
        '3,CA-2016-138688,6/12/2016,6/16/2016,Second Class,DV-13045,Corporate,West,'
        'OFF-LA-10000240,Office Supplies,Labels,"Self-Adhesive Address Labels",14.62,2,0,6.8714',
        '4,US-2015-108966,10/11/2015,10/18/2015,Standard Class,SO-20335,Consumer,South,'
        'FUR-TA-10000577,Furniture,Tables,"Bretford CR4500 Series Table",957.5775,5,0.45,-383.031',
    ]
    path = tmp_path / "superstore.csv"
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")
    return path
