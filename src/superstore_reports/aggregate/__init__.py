"""Report aggregation helpers.

This package contains the generic tabular primitives (`toolkit`), the
sixteen Superstore report functions built from them (`reports`) and the
display-only currency formatting applied at the presentation boundary
(`formatting`).
"""
