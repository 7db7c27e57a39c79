from __future__ import annotations

import pytest

from md_estimate.markdown.table import (
    MissingColumnError,
    NoTableError,
    TableValidationError,
    filter_columns,
    normalize_table,
    parse_and_validate_table,
    read_markdown_tables,
    separate_tables,
    validate_rows,
)
from md_estimate.models.line_item import ValidatedLineItem


def _table(header: str, *rows: str) -> str:
    cells = header.count("|") - 1
    separator = "|" + "|".join(["---"] * cells) + "|"
    return "\n".join([header, separator, *rows]) + "\n"


def test_read_markdown_tables_keeps_header_row():
    body = "Intro text\n\n" + _table("| Item | Price | Qty |", "| A | 10 | 2 |")
    tables = read_markdown_tables(body)
    assert len(tables) == 1
    assert tables[0].iloc[0].tolist() == ["Item", "Price", "Qty"]
    assert tables[0].iloc[1].tolist() == ["A", "10", "2"]


def test_read_markdown_tables_none():
    assert read_markdown_tables("# Just a heading\n\nSome text.\n") == []


def test_parse_and_validate_table_success():
    body = _table("| Item | Price | Qty |", "| Design | 19.99 | 2 |", "| Build | 100 | 1 |")
    items = parse_and_validate_table(body)
    assert items == [
        ValidatedLineItem(item="Design", price=19.99, qty=2),
        ValidatedLineItem(item="Build", price=100.0, qty=1),
    ]


def test_header_variations_and_extra_columns():
    body = _table("| Qty | NOTES | price | ITEM |", "| 3 | rush | 5.5 | Icons |")
    items = parse_and_validate_table(body)
    assert items == [ValidatedLineItem(item="Icons", price=5.5, qty=3)]


def test_no_table_found():
    with pytest.raises(NoTableError) as e:
        parse_and_validate_table("No table here.\n")
    assert str(e.value) == "Please provide an estimate table in the markdown content."


@pytest.mark.parametrize("header, missing", [
    ("| Item | Price | Quantity |", "qty"),
    ("| Item | Cost | Qty |", "price"),
    ("| Name | Price | Qty |", "item"),
])
def test_missing_column_named(header, missing):
    body = _table(header, "| A | 1 | 1 |")
    with pytest.raises(MissingColumnError) as e:
        parse_and_validate_table(body)
    assert str(e.value) == f"Missing expected column '{missing}'"
    assert e.value.column == missing


def test_invalid_price_reported():
    rows = [{"item": "A", "price": "ten", "qty": "2"}]
    with pytest.raises(TableValidationError) as e:
        validate_rows(rows)
    assert str(e.value) == "Object 1: Invalid Price"


def test_all_violations_aggregated():
    body = _table(
        "| Item | Price | Qty |",
        "| A | 10 | 1 |",
        "| B | abc | x |",
        "| C | 5 | many |",
    )
    with pytest.raises(TableValidationError) as e:
        parse_and_validate_table(body)
    assert str(e.value).splitlines() == [
        "Object 2: Invalid Price",
        "Object 2: Invalid Qty",
        "Object 3: Invalid Qty",
    ]
    assert [(v.row, v.column) for v in e.value.violations] == [(2, "price"), (2, "qty"), (3, "qty")]


def test_empty_cells_are_invalid():
    with pytest.raises(TableValidationError) as e:
        validate_rows([{"item": "A", "price": "", "qty": ""}])
    assert len(e.value.violations) == 2


def test_header_only_table_yields_no_items():
    body = _table("| Item | Price | Qty |")
    assert parse_and_validate_table(body) == []


def test_normalize_skips_blank_rows():
    tables = read_markdown_tables(_table("| Item | Price | Qty |", "| | | |", "| A | 1 | 1 |"))
    rows = normalize_table(tables[0])
    assert rows == [{"item": "A", "price": "1", "qty": "1"}]


def test_filter_columns_drops_extras():
    rows = [{"item": "A", "price": "1", "qty": "1", "note": "x"}]
    assert filter_columns(rows) == [{"item": "A", "price": "1", "qty": "1"}]


def test_only_first_table_is_used():
    body = _table("| Item | Price | Qty |", "| A | 1 | 1 |") + "\n" + _table("| Other |", "| x |")
    assert [i.item for i in parse_and_validate_table(body)] == ["A"]


def test_table_directly_under_text_line_is_found():
    body = "Estimate for the work:\n" + _table("| Item | Price | Qty |", "| A | 10 | 2 |")
    assert parse_and_validate_table(body) == [ValidatedLineItem(item="A", price=10.0, qty=2)]


def test_separate_tables_only_touches_table_headers():
    body = "Intro:\n| Item | Price | Qty |\n|:---|---:|---|\n| A | 1 | 1 |\nText | with pipe\n"
    assert separate_tables(body) == (
        "Intro:\n\n| Item | Price | Qty |\n|:---|---:|---|\n| A | 1 | 1 |\nText | with pipe\n"
    )


def test_separate_tables_keeps_already_separated_body():
    body = "Intro\n\n" + _table("| Item | Price | Qty |", "| A | 1 | 1 |")
    assert separate_tables(body) == body
