"""superstore_reports package.

Loads the Superstore retail order table into memory and computes the
sixteen analytical report tables (regional and category totals, margins,
monthly and yearly trends, customer rankings, discount impact).

Architecture:
- CSV → Dask partition cleaning → pydantic validation → pandas DataFrame
- `AggregationEngine` holds the immutable frame and runs report functions
- Report functions compose small pandas primitives from `aggregate.toolkit`
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
