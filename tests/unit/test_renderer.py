from __future__ import annotations

from pathlib import Path

import pytest

from md_estimate.config.loader import EstimateSettings
from md_estimate.markdown.table import MissingColumnError, NoTableError
from md_estimate.models.invoice import InvoiceParameters
from md_estimate.models.line_item import ValidatedLineItem
from md_estimate.services.renderer import (
    BODY_STYLE,
    TemplateError,
    build_html,
    generate_table_body,
    generate_table_foot,
    get_replacement_args,
    load_template,
    replace_placeholders,
)
from md_estimate.services.totals import calculate_invoice_totals, calculate_unit_totals


def test_replace_placeholders_leaves_unknown_tokens():
    assert replace_placeholders("{{title}} - {{unknownField}}", {"title": "X"}) == "X - {{unknownField}}"


def test_replace_placeholders_is_case_sensitive_and_flat():
    html = "{{Title}} {{title}} {{ title }} {{a.b}}"
    assert replace_placeholders(html, {"title": "T", "a": "A"}) == "{{Title}} T {{ title }} {{a.b}}"


def test_replace_placeholders_does_not_rescan_values():
    assert replace_placeholders("{{a}}", {"a": "{{b}}", "b": "no"}) == "{{b}}"


def test_generate_table_body_rows():
    priced = calculate_unit_totals([ValidatedLineItem(item="Logo", price=100.0, qty=2)], "usd", 10)
    body = generate_table_body(priced)
    assert body.startswith("<tbody>") and body.endswith("</tbody>")
    assert "<td>1</td>" in body
    assert '<td class="text-start">Logo</td>' in body
    assert "<td>$110.00</td>" in body
    assert "<td>2</td>" in body
    assert "<td>$220.00</td>" in body


def test_generate_table_body_empty():
    assert generate_table_body([]) == "<tbody></tbody>"


def test_generate_table_foot_all_rows():
    priced = calculate_unit_totals([ValidatedLineItem(item="A", price=100.0, qty=1)], "usd", 0)
    totals = calculate_invoice_totals(priced, InvoiceParameters(tax=15, other_fee=2.5, discount=10))
    foot = generate_table_foot(totals)
    assert "Subtotal:</td>" in foot
    assert "Tax (15%):</td>" in foot
    assert "<td>$15.00</td>" in foot
    assert "<td>-$10.00</td>" in foot
    assert "Additional Fees (Paypal, Conversion, etc) (2.5%):</td>" in foot
    assert "Total:</td>" in foot
    assert foot.index("Discount") < foot.index("Additional Fees")


def test_generate_table_foot_only_total_when_empty():
    totals = calculate_invoice_totals([], InvoiceParameters())
    foot = generate_table_foot(totals)
    assert "Subtotal" not in foot
    assert "Tax (" not in foot
    assert "Discount" not in foot
    assert "Total:</td>" in foot
    assert '<td class="bg-secondary text-success fs-5">$0.00</td>' in foot


def test_get_replacement_args(simple_markdown):
    args = get_replacement_args(simple_markdown)
    data = args.as_dict()
    assert data["title"] == "Logo"
    assert data["clientName"] == "Bob"
    assert data["devName"] == ""
    assert data["bodyStyle"] == BODY_STYLE
    assert data["totalPrice"] == "$220.00"
    assert "$110.00" in data["tableBody"]
    assert set(data) == {
        "devName", "devEmail", "devSkype", "devTwitter", "devWebsite", "devLocation",
        "clientName", "clientCompany", "clientLocation", "clientEmail",
        "title", "description", "notes", "date",
        "bodyStyle", "tableBody", "tableFoot", "totalPrice",
    }


def test_get_replacement_args_propagates_table_errors():
    with pytest.raises(NoTableError):
        get_replacement_args("---\ntitle: x\n---\nno table\n")
    with pytest.raises(MissingColumnError):
        get_replacement_args("| Item | Price |\n| --- | --- |\n| A | 1 |\n")


def test_load_template_inlines_css():
    html = load_template()
    assert '<link rel="stylesheet" href="/index.css">' not in html
    assert "<style>" in html
    assert "{{tableBody}}" in html


def test_load_template_missing_files(tmp_path: Path):
    with pytest.raises(TemplateError) as e:
        load_template(tmp_path)
    assert str(e.value) == "HTML template file is missing."
    (tmp_path / "index.html").write_text("<html></html>", encoding="utf-8")
    with pytest.raises(TemplateError) as e:
        load_template(tmp_path)
    assert str(e.value) == "CSS file is missing."


def test_build_html_with_custom_template(tmp_path: Path, simple_markdown):
    (tmp_path / "index.html").write_text(
        '<link rel="stylesheet" href="/index.css">{{title}}|{{totalPrice}}|{{extra}}', encoding="utf-8"
    )
    (tmp_path / "index.css").write_text("p{color:red}", encoding="utf-8")
    html = build_html(simple_markdown, EstimateSettings(template_directory=str(tmp_path)))
    assert html == "<style>p{color:red}</style>Logo|$220.00|{{extra}}"


def test_build_html_default_template_has_no_known_placeholders_left(simple_markdown):
    html = build_html(simple_markdown)
    for name in ("title", "tableBody", "tableFoot", "totalPrice", "clientName", "notes"):
        assert "{{" + name + "}}" not in html
