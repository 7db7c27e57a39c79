from __future__ import annotations

from dataclasses import dataclass

"""Invoice-level financial models.

InvoiceParameters carries the scalar configuration read from front-matter,
InvoiceTotals the aggregated figures derived from the priced line items.
"""

__all__ = [
    "DEFAULT_CURRENCY",
    "InvoiceParameters",
    "InvoiceTotals",
]

DEFAULT_CURRENCY = "usd"


@dataclass(frozen=True)
class InvoiceParameters:
    """Financial configuration for one document.

    Percentages are plain numbers (15 == 15%). Absent or unparsable values are 0.
    ``service_tax`` is applied per unit, ``tax`` and ``other_fee`` once on the subtotal.
    ``discount`` is an absolute amount.
    """
    currency: str = DEFAULT_CURRENCY
    service_tax: float = 0.0
    tax: float = 0.0
    other_fee: float = 0.0
    discount: float = 0.0


@dataclass(frozen=True)
class InvoiceTotals:
    """Aggregated invoice figures and their display strings.

    Invariants:
        subtotal = sum(total_with_tax) over the line items (left to right)
        tax_amt = subtotal * tax / 100
        other_fee_amt = subtotal * other_fee / 100
        total = subtotal + tax_amt + other_fee_amt - discount
    """
    subtotal: float
    tax: float
    tax_amt: float
    discount: float
    other_fee: float
    other_fee_amt: float
    total: float
    subtotal_html: str
    tax_amt_html: str
    other_fee_amt_html: str
    discount_html: str
    total_html: str  # total rounded to an integer before formatting
