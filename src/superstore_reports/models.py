"""Pydantic models used to validate loaded order rows.

`OrderRecord` defines the expected schema for one line item of the
Superstore table. Rows that fail validation are reported by the loader
rather than coerced.
"""

from __future__ import annotations

from datetime import date
from pydantic import BaseModel, Field, ConfigDict

ORDER_COLUMNS = (
    "order_id",
    "customer_id",
    "order_date",
    "region",
    "category",
    "sub_category",
    "product_name",
    "sales",
    "profit",
    "discount",
    "quantity",
)

class OrderRecord(BaseModel):
    """Schema for a single Superstore order line item.

    Attributes:
        order_id: Order identifier (repeats across line items of one order).
        customer_id: Customer identifier.
        order_date: Calendar date the order was placed.
        region: Sales region (East/West/South/Central in the public dataset).
        category: Product category.
        sub_category: Product sub-category within `category`.
        product_name: Product name.
        sales: Line sales amount, non-negative.
        profit: Line profit, may be negative.
        discount: Line discount as a fraction in [0, 1].
        quantity: Units sold, positive.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)
    order_id: str = Field(..., min_length=1)
    customer_id: str = Field(..., min_length=1)
    order_date: date
    region: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    sub_category: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    sales: float = Field(..., ge=0, allow_inf_nan=False)
    profit: float = Field(..., allow_inf_nan=False)
    discount: float = Field(..., ge=0, le=1, allow_inf_nan=False)
    quantity: int = Field(..., gt=0)
