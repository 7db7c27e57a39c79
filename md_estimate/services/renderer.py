from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from ..config.loader import EstimateSettings
from ..markdown.front_matter import parse_document
from ..markdown.table import parse_and_validate_table
from ..models.invoice import InvoiceTotals
from ..models.line_item import PricedLineItem
from ..utils.values import DEFAULT_DATE_FORMAT, format_number
from .metadata import organize_metadata
from .totals import calculate_invoice_totals, calculate_unit_totals

"""Document renderer.

Builds the table fragments, collects every template field into one fixed
record (ReplacementArgs) and substitutes ``{{name}}`` tokens in the HTML
template. Tokens without a matching field are left untouched so templates can
carry optional sections.
"""

__all__ = [
    "TemplateError",
    "ReplacementArgs",
    "BODY_STYLE",
    "replace_placeholders",
    "generate_table_body",
    "generate_table_foot",
    "get_replacement_args",
    "load_template",
    "build_html",
]

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "template"
CSS_LINK = '<link rel="stylesheet" href="/index.css">'

BODY_STYLE = (
    "<style>body{margin:0 auto;width:1024px;transform:scale(4);"
    "transform-origin:left top;padding:35px}</style>"
)

_PLACEHOLDER = re.compile(r"{{(.*?)}}")


class TemplateError(Exception):
    """Raised when the HTML template or its stylesheet cannot be found."""


@dataclass(frozen=True)
class ReplacementArgs:
    """Every field the template may reference. Nothing outside this set is substituted."""
    devName: str
    devEmail: str
    devSkype: str
    devTwitter: str
    devWebsite: str
    devLocation: str
    clientName: str
    clientCompany: str
    clientLocation: str
    clientEmail: str
    title: str
    description: str
    notes: str
    date: str
    bodyStyle: str
    tableBody: str
    tableFoot: str
    totalPrice: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


def replace_placeholders(html: str, data: Mapping[str, Any]) -> str:
    """Replace ``{{name}}`` tokens with ``data[name]``; unknown names stay verbatim."""
    def repl(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in data:
            return str(data[name])
        return match.group(0)

    return _PLACEHOLDER.sub(repl, html)


def generate_table_body(items: list[PricedLineItem]) -> str:
    rows = "".join(
        f"""
    <tr>
      <td>{index}</td>
      <td class="text-start">{item.item}</td>
      <td>{item.price_html_with_tax}</td>
      <td>{item.qty}</td>
      <td>{item.total_html_with_tax}</td>
    </tr>"""
        for index, item in enumerate(items, start=1)
    )
    return f"<tbody>{rows}</tbody>"


def _foot_row(label: str, value: str) -> str:
    return f"""
    <tr>
      <td></td>
      <td colspan="3" class="text-end">{label}:</td>
      <td>{value}</td>
    </tr>
  """


def generate_table_foot(totals: InvoiceTotals) -> str:
    """Subtotal / tax / discount / fee rows (only when > 0) followed by the total row."""
    rows: list[str] = []
    if totals.subtotal > 0:
        rows.append(_foot_row("Subtotal", totals.subtotal_html))
    if totals.tax > 0:
        rows.append(_foot_row(f"Tax ({format_number(totals.tax)}%)", totals.tax_amt_html))
    if totals.discount > 0:
        rows.append(_foot_row("Discount", f"-{totals.discount_html}"))
    if totals.other_fee > 0:
        label = f"Additional Fees (Paypal, Conversion, etc) ({format_number(totals.other_fee)}%)"
        rows.append(_foot_row(label, totals.other_fee_amt_html))
    rows.append(f"""
    <tr class="fw-bold">
      <td colspan="2"></td>
      <td colspan="2" class="text-end bg-secondary text-success fs-5">Total:</td>
      <td class="bg-secondary text-success fs-5">{totals.total_html}</td>
    </tr>
  """)
    return f"<tfoot>{''.join(rows)}</tfoot>"


def get_replacement_args(markdown_text: str, date_format: str = DEFAULT_DATE_FORMAT) -> ReplacementArgs:
    """Run the whole pipeline on a Markdown document and collect the template fields.

    Raises:
        MetadataError: Invalid front-matter
        TableError: Missing / invalid pricing table
        ArithmeticError: Non-numeric percentage operands
    """
    document = parse_document(markdown_text)
    metadata = organize_metadata(document.data, date_format)
    params = metadata.parameters

    line_items = parse_and_validate_table(document.content)
    priced = calculate_unit_totals(line_items, params.currency, params.service_tax)
    totals = calculate_invoice_totals(priced, params)

    return ReplacementArgs(
        **asdict(metadata.developer),
        **asdict(metadata.client),
        **asdict(metadata.project),
        bodyStyle=BODY_STYLE,
        tableBody=generate_table_body(priced),
        tableFoot=generate_table_foot(totals),
        totalPrice=totals.total_html,
    )


def load_template(template_dir: Path | None = None) -> str:
    """Read index.html and inline index.css in place of its stylesheet link.

    Raises:
        TemplateError: If either file is missing
    """
    directory = template_dir if template_dir is not None else TEMPLATE_DIR
    html_path = directory / "index.html"
    css_path = directory / "index.css"
    if not html_path.exists():
        raise TemplateError("HTML template file is missing.")
    if not css_path.exists():
        raise TemplateError("CSS file is missing.")
    html = html_path.read_text(encoding="utf-8")
    css = css_path.read_text(encoding="utf-8")
    return html.replace(CSS_LINK, f"<style>{css}</style>")


def build_html(markdown_text: str, settings: EstimateSettings | None = None) -> str:
    """Markdown document text -> fully substituted HTML."""
    settings = settings or EstimateSettings()
    template_dir = Path(settings.template_directory) if settings.template_directory else None
    template = load_template(template_dir)
    args = get_replacement_args(markdown_text, settings.date_format)
    return replace_placeholders(template, args.as_dict())
