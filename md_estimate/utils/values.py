from __future__ import annotations

import math
import re
import time
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd
from slugify import slugify

"""Value normalization helpers shared by the table extractor, totals engine and renderer.

Covers:
- price / integer cleaning (leading numeric prefix, "20%" -> 20)
- percentage math
- currency symbol lookup and price formatting
- slug generation for column keys and output file names
- date formatting with "MMM DD, YYYY" style tokens
"""

__all__ = [
    "CURRENCIES",
    "DEFAULT_DATE_FORMAT",
    "clean_price",
    "clean_number",
    "calculate_percentage",
    "currency_symbol",
    "format_price",
    "format_number",
    "generate_slug",
    "slugify_keys",
    "format_date",
    "current_date",
    "output_image_name",
]

DEFAULT_DATE_FORMAT = "MMM DD, YYYY"

# Read-only lookup table (code -> symbol)
CURRENCIES: dict[str, str] = {
    "usd": "$",
    "aud": "$",
    "gbp": "£",
    "eur": "€",
    "inr": "₹",
    "brl": "R$",
    "cad": "$",
    "hkd": "$",
    "ils": "₪",
    "jpy": "¥",
    "mxn": "$",
    "twd": "NT$",
    "nzd": "$",
    "php": "P",
    "sgd": "$",
    "thb": "฿",
    "kes": "Ksh",
    "ngn": "₦",
}

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

# Longest tokens first so "MMMM" wins over "MMM" and "MM"
_DATE_TOKENS = re.compile(r"YYYY|YY|MMMM|MMM|MM|DD|dddd|ddd|HH|mm|ss")
_STRFTIME = {
    "YYYY": "%Y",
    "YY": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "DD": "%d",
    "dddd": "%A",
    "ddd": "%a",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def clean_price(value: Any) -> float | None:
    """Convert a price-like value to float.

    Returns ``None`` for absent/empty input and ``nan`` when no leading number
    can be read. Trailing text is ignored, so ``"20%"`` becomes ``20.0``.
    """
    if _is_empty(value):
        return None
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    match = _FLOAT_PREFIX.match(str(value))
    if match is None:
        return math.nan
    return float(match.group(1))


def clean_number(value: Any) -> int | float | None:
    """Integer analogue of :func:`clean_price` (``"2.5"`` -> 2, ``"two"`` -> nan)."""
    if _is_empty(value):
        return None
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else math.nan
    match = _INT_PREFIX.match(str(value))
    if match is None:
        return math.nan
    return int(match.group(1))


def calculate_percentage(value: float, percent: float) -> float:
    """Return ``value * percent / 100``.

    Raises:
        ArithmeticError: If either argument is not a number
    """
    if _is_nan(value) or _is_nan(percent):
        raise ArithmeticError("Both 'value' and 'percent' must be valid numbers.")
    return (value * percent) / 100


def _is_nan(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return True


def currency_symbol(code: str | None) -> str:
    if not code:
        return ""
    return CURRENCIES.get(str(code).lower(), "")


def format_price(value: Any, currency: str | None = "usd") -> str:
    """Format ``value`` with two decimals, prefixed by the currency symbol if known.

    Rounding is half-up on the exact binary value (``19.999`` -> ``20.00``).
    Unknown currency codes simply drop the symbol.
    """
    symbol = currency_symbol(currency)
    amount = clean_price(value)
    if amount is None:
        amount = math.nan
    if not math.isfinite(amount):
        return f"{symbol}{amount}"
    if amount == 0:
        amount = 0.0  # no "-0.00"
    return f"{symbol}{Decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def format_number(value: float) -> str:
    """Render a percentage for labels: ``15.0`` -> ``"15"``, ``2.5`` -> ``"2.5"``."""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def generate_slug(text: str, lower: bool = True) -> str:
    """ASCII-transliterated, hyphen separated slug of ``text``."""
    return slugify(str(text), lowercase=lower)


def slugify_keys(row: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``row`` with every key slugified (last duplicate wins)."""
    slugged: dict[str, Any] = {}
    for key, value in row.items():
        slugged[generate_slug(key)] = value
    return slugged


def _to_strftime(fmt: str) -> str:
    return _DATE_TOKENS.sub(lambda m: _STRFTIME[m.group(0)], fmt.replace("%", "%%"))


def format_date(value: str | date | datetime, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date string (or date object) using ``MMM DD, YYYY`` style tokens.

    Raises:
        ValueError: If ``value`` cannot be parsed as a date
    """
    try:
        stamp = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"invalid date: {value!r}") from e
    if pd.isna(stamp):
        raise ValueError(f"invalid date: {value!r}")
    return stamp.to_pydatetime().strftime(_to_strftime(fmt))


def current_date(fmt: str = DEFAULT_DATE_FORMAT) -> str:
    return datetime.now().strftime(_to_strftime(fmt))


def output_image_name(image_type: str = "jpeg", now_ms: int | None = None) -> str:
    """Build ``Estimate-Image-<epoch ms>.<type>``."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    unique_slug = generate_slug(f"Estimate Image {stamp}", lower=False)
    return f"{unique_slug}.{image_type}"
