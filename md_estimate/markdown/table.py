from __future__ import annotations

import math
import re
from typing import Any

import lxml.html
import markdown
import pandas as pd

from ..models.line_item import EXPECTED_COLUMNS, ValidatedLineItem
from ..models.row_violation import RowViolation
from ..utils.values import clean_number, clean_price, slugify_keys

"""Markdown pricing table extraction.

Steps:
1. Render the Markdown body with Python-Markdown (``tables`` extension)
2. Read every ``<table>`` into a raw DataFrame (row 0 = header text)
3. Normalize: header keys slugified, blank rows dropped, only item/price/qty kept
4. Validate price / qty cells, collecting every violation before failing
"""

__all__ = [
    "TableError",
    "NoTableError",
    "MissingColumnError",
    "TableValidationError",
    "separate_tables",
    "read_markdown_tables",
    "normalize_table",
    "filter_columns",
    "validate_rows",
    "to_line_items",
    "parse_and_validate_table",
]

NO_TABLE_MESSAGE = "Please provide an estimate table in the markdown content."

_TABLE_SEPARATOR = re.compile(r"^\s*\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?\s*$")


class TableError(Exception):
    """Base class for pricing table failures."""


class NoTableError(TableError):
    """Raised when the Markdown body contains no table."""

    def __init__(self, message: str = NO_TABLE_MESSAGE) -> None:
        super().__init__(message)


class MissingColumnError(TableError):
    """Raised when a row lacks one of item / price / qty."""

    def __init__(self, column: str) -> None:
        super().__init__(f"Missing expected column '{column}'")
        self.column = column


class TableValidationError(TableError):
    """Raised with every invalid price / qty cell of the table."""

    def __init__(self, violations: list[RowViolation]) -> None:
        super().__init__("\n".join(v.message for v in violations))
        self.violations = violations


def _is_separator(line: str) -> bool:
    return "|" in line and "-" in line and _TABLE_SEPARATOR.match(line) is not None


def separate_tables(body: str) -> str:
    """Put a blank line before every pipe table header that directly follows text.

    Python-Markdown only detects a table that starts its own block.
    """
    lines = body.split("\n")
    out: list[str] = []
    for index, line in enumerate(lines):
        is_header = (
            "|" in line
            and not _is_separator(line)
            and index + 1 < len(lines)
            and _is_separator(lines[index + 1])
        )
        if is_header and out and out[-1].strip() != "":
            out.append("")
        out.append(line)
    return "\n".join(out)


def read_markdown_tables(body: str) -> list[pd.DataFrame]:
    """Render ``body`` and return one raw string DataFrame per table, in document order.

    The header row is kept as row 0 (no header applied), mirroring how the
    cells appear in the source.
    """
    html = markdown.markdown(separate_tables(body), extensions=["tables"])
    if "<table" not in html:
        return []
    root = lxml.html.fragment_fromstring(html, create_parent="div")
    frames: list[pd.DataFrame] = []
    for table in root.iter("table"):
        rows: list[list[str]] = []
        for tr in table.iter("tr"):
            cells = [cell.text_content().strip() for cell in tr if cell.tag in ("th", "td")]
            rows.append(cells)
        frames.append(pd.DataFrame(rows, dtype=object))
    return frames


def normalize_table(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Turn a raw table DataFrame into row dicts keyed by slugified header.

    Rows whose cells are all blank are skipped; a header-only Markdown table
    renders one such row and therefore yields no records.
    """
    if df.shape[0] == 0:
        return []
    columns = ["" if pd.isna(c) else str(c) for c in df.iloc[0].tolist()]
    records: list[dict[str, Any]] = []
    for _, raw in df.iloc[1:].iterrows():
        values = ["" if pd.isna(v) else str(v) for v in raw.tolist()]
        if all(v.strip() == "" for v in values):
            continue
        row = dict(zip(columns, values, strict=False))
        records.append(slugify_keys(row))
    return records


def filter_columns(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep exactly item / price / qty on every row.

    Raises:
        MissingColumnError: On the first row missing one of the columns
    """
    filtered: list[dict[str, Any]] = []
    for row in rows:
        kept: dict[str, Any] = {}
        for column in EXPECTED_COLUMNS:
            if column not in row:
                raise MissingColumnError(column)
            kept[column] = row[column]
        filtered.append(kept)
    return filtered


def _valid_price(value: Any) -> bool:
    parsed = clean_price(value)
    # empty cells clean to None, which is not a price
    return parsed is not None and math.isfinite(parsed)


def _valid_qty(value: Any) -> bool:
    parsed = clean_number(value)
    return isinstance(parsed, int)


def validate_rows(rows: list[dict[str, Any]]) -> None:
    """Check price / qty of every row.

    Raises:
        TableValidationError: With one violation per offending cell (all rows)
    """
    violations: list[RowViolation] = []
    for index, row in enumerate(rows, start=1):
        if "price" in row and not _valid_price(row["price"]):
            violations.append(RowViolation(row=index, column="price"))
        if "qty" in row and not _valid_qty(row["qty"]):
            violations.append(RowViolation(row=index, column="qty"))
    if violations:
        raise TableValidationError(violations)


def to_line_items(rows: list[dict[str, Any]]) -> list[ValidatedLineItem]:
    """Convert validated item/price/qty rows into typed line items."""
    return [
        ValidatedLineItem(
            item=str(row["item"]),
            price=clean_price(row["price"]),  # type: ignore[arg-type]
            qty=clean_number(row["qty"]),  # type: ignore[arg-type]
        )
        for row in rows
    ]


def parse_and_validate_table(body: str) -> list[ValidatedLineItem]:
    """Extract the first pricing table of ``body`` as typed line items.

    Raises:
        NoTableError: If the body has no table
        MissingColumnError: If a row lacks item, price or qty
        TableValidationError: If any price / qty cell is invalid
    """
    tables = read_markdown_tables(body)
    if not tables:
        raise NoTableError()
    rows = filter_columns(normalize_table(tables[0]))
    validate_rows(rows)
    return to_line_items(rows)
