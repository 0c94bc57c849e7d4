"""Cleaning utilities for loaded order data.

Provides functions to normalize Superstore column headers, trim text,
parse dates and numbers, and validate rows against `OrderRecord`.
"""
