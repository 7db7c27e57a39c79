from __future__ import annotations

import math
from typing import Any

from ..markdown.front_matter import MetadataError
from ..models.invoice import DEFAULT_CURRENCY, InvoiceParameters
from ..models.metadata import ClientInfo, DeveloperInfo, DocumentMetadata, ProjectInfo
from ..utils.values import DEFAULT_DATE_FORMAT, clean_price, current_date, format_date

"""Metadata organizer: flat front-matter mapping -> grouped, typed records.

Only the fixed field set below is ever read; any other front-matter key is
ignored so it can never reach the template as a placeholder value.
"""

__all__ = [
    "DEVELOPER_FIELDS",
    "CLIENT_FIELDS",
    "parse_description",
    "parse_notes",
    "organize_developer_info",
    "organize_client_info",
    "organize_project_info",
    "extract_invoice_parameters",
    "organize_metadata",
]

DEVELOPER_FIELDS = ("devName", "devEmail", "devSkype", "devTwitter", "devWebsite", "devLocation")
CLIENT_FIELDS = ("clientName", "clientCompany", "clientLocation", "clientEmail")


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    # falsy values (None, False, "", 0) render as empty
    if not value:
        return ""
    return str(value)


def _lines(text: str) -> list[str]:
    return [line for line in text.strip().split("\n") if line.strip() != ""]


def parse_description(text: str) -> str:
    """Newline separated text -> ``<div class="my-4"><p>..</p>...</div>`` ("" if blank)."""
    lines = _lines(text)
    if not lines:
        return ""
    paragraphs = "".join(f"<p>{line}</p>" for line in lines)
    return f'<div class="my-4">{paragraphs}</div>'


def parse_notes(text: str) -> str:
    """Newline separated text -> "Notes" heading + ordered list ("" if blank)."""
    lines = _lines(text)
    if not lines:
        return ""
    items = "".join(f"<li>{line}</li>" for line in lines)
    return f'<h6 class="fw-bold">Notes:</h6><ol>{items}</ol>'


def organize_developer_info(data: dict[str, Any]) -> DeveloperInfo:
    return DeveloperInfo(**{key: _text(data, key) for key in DEVELOPER_FIELDS})


def organize_client_info(data: dict[str, Any]) -> ClientInfo:
    return ClientInfo(**{key: _text(data, key) for key in CLIENT_FIELDS})


def organize_project_info(data: dict[str, Any], date_format: str = DEFAULT_DATE_FORMAT) -> ProjectInfo:
    """Build the project section.

    ``date`` falls back to today's date when missing.

    Raises:
        MetadataError: If ``date`` is present but cannot be parsed
    """
    raw_date = _text(data, "date")
    if raw_date:
        try:
            display_date = format_date(raw_date, date_format)
        except ValueError as e:
            raise MetadataError(str(e)) from e
    else:
        display_date = current_date(date_format)
    return ProjectInfo(
        title=_text(data, "title"),
        description=parse_description(_text(data, "description")),
        notes=parse_notes(_text(data, "notes")),
        date=display_date,
    )


def _percentage(data: dict[str, Any], key: str) -> float:
    # "20%" -> 20.0; unparsable counts as absent
    cleaned = clean_price(data.get(key) or 0)
    if cleaned is None or math.isnan(cleaned):
        return 0.0
    return cleaned


def extract_invoice_parameters(data: dict[str, Any]) -> InvoiceParameters:
    return InvoiceParameters(
        currency=_text(data, "currency") or DEFAULT_CURRENCY,
        service_tax=_percentage(data, "serviceTax"),
        tax=_percentage(data, "tax"),
        other_fee=_percentage(data, "otherFee"),
        discount=_percentage(data, "discount"),
    )


def organize_metadata(data: dict[str, Any], date_format: str = DEFAULT_DATE_FORMAT) -> DocumentMetadata:
    """Group a front-matter mapping into developer / client / project / financial records."""
    return DocumentMetadata(
        developer=organize_developer_info(data),
        client=organize_client_info(data),
        project=organize_project_info(data, date_format),
        parameters=extract_invoice_parameters(data),
    )
