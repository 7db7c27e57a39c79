from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from ..models.invoice import InvoiceParameters, InvoiceTotals
from ..models.line_item import PricedLineItem, ValidatedLineItem
from ..utils.values import calculate_percentage, clean_price, format_price

"""Totals engine: per-line and invoice-level monetary figures.

Two different rates are involved and must stay separate:
- service tax: applied per unit, changes the displayed unit price
- invoice tax / other fee: applied once on the aggregated subtotal
Discount is an absolute amount subtracted from the total.
"""

__all__ = [
    "positive_amount",
    "calculate_unit_totals",
    "calculate_invoice_totals",
]


def positive_amount(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as float when it is a finite number > 0, else ``default``.

    "Absent", "not a number" and "<= 0" all mean "no such charge".
    """
    cleaned = clean_price(value)
    if cleaned is None or not math.isfinite(cleaned) or cleaned <= 0:
        return default
    return cleaned


def _round_half_up(value: float) -> float:
    # half-way cases round towards +inf (2.5 -> 3, -2.5 -> -2)
    return float(math.floor(value + 0.5))


def calculate_unit_totals(
    items: Iterable[ValidatedLineItem], currency: str, service_tax: Any = 0
) -> list[PricedLineItem]:
    """Price every line item with the per-unit service tax.

    Args:
        items: Validated line items
        currency: Currency code used for the display strings
        service_tax: Percentage; ignored (0) unless a finite number > 0

    Returns:
        PricedLineItem list in input order
    """
    tax_rate = positive_amount(service_tax)
    priced: list[PricedLineItem] = []
    for row in items:
        price = clean_price(row.price)
        total = row.qty * price
        price_with_tax = price + calculate_percentage(price, tax_rate)
        total_with_tax = row.qty * price_with_tax
        priced.append(
            PricedLineItem(
                item=row.item,
                price=price,
                qty=row.qty,
                total=total,
                price_with_tax=price_with_tax,
                total_with_tax=total_with_tax,
                price_html=format_price(price, currency),
                total_html=format_price(total, currency),
                price_html_with_tax=format_price(price_with_tax, currency),
                total_html_with_tax=format_price(total_with_tax, currency),
            )
        )
    return priced


def calculate_invoice_totals(items: Iterable[PricedLineItem], parameters: InvoiceParameters) -> InvoiceTotals:
    """Aggregate priced line items into invoice totals.

    Pure function: the same input always yields the same totals.

    Raises:
        ArithmeticError: If the subtotal is not a number
    """
    currency = parameters.currency
    tax = positive_amount(parameters.tax)
    other_fee = positive_amount(parameters.other_fee)
    discount = positive_amount(parameters.discount)

    # left-to-right accumulation (sum() compensates float error on 3.12+)
    subtotal = 0.0
    for row in items:
        subtotal = subtotal + row.total_with_tax

    tax_amt = calculate_percentage(subtotal, tax)
    other_fee_amt = calculate_percentage(subtotal, other_fee)
    total = subtotal + tax_amt + other_fee_amt - discount

    return InvoiceTotals(
        subtotal=subtotal,
        tax=tax,
        tax_amt=tax_amt,
        discount=discount,
        other_fee=other_fee,
        other_fee_amt=other_fee_amt,
        total=total,
        subtotal_html=format_price(subtotal, currency),
        tax_amt_html=format_price(tax_amt, currency),
        other_fee_amt_html=format_price(other_fee_amt, currency),
        discount_html=format_price(discount, currency),
        total_html=format_price(_round_half_up(total), currency),
    )
