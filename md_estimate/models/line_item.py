from __future__ import annotations

from dataclasses import dataclass

"""Line item models for the estimate pricing table.

A table row goes through three shapes:
- NormalizedRow: plain dict restricted to item/price/qty (raw strings)
- ValidatedLineItem: price/qty parsed and checked
- PricedLineItem: unit and line totals with and without service tax
"""

__all__ = [
    "EXPECTED_COLUMNS",
    "ValidatedLineItem",
    "PricedLineItem",
]

# Canonical (slugified) column names, in the order they are checked
EXPECTED_COLUMNS: tuple[str, ...] = ("item", "price", "qty")


@dataclass(frozen=True)
class ValidatedLineItem:
    """One billable row after cell validation."""
    item: str
    price: float  # finite
    qty: int


@dataclass(frozen=True)
class PricedLineItem:
    """Validated row extended with service-tax aware totals.

    Invariants:
        price_with_tax = price + price * tax_rate / 100
        total_with_tax = qty * price_with_tax
    """
    item: str
    price: float
    qty: int
    total: float  # qty * price
    price_with_tax: float
    total_with_tax: float
    price_html: str
    total_html: str
    price_html_with_tax: str
    total_html_with_tax: str
