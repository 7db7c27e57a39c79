from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Front-matter reader.

Splits a Markdown document into its YAML front-matter block (``---`` fenced,
first thing in the file) and the Markdown body, then validates the recognized
fields against ``front_matter_schema.json``. Unknown keys are kept in the
mapping but never read downstream.
"""

__all__ = [
    "MetadataError",
    "ParsedDocument",
    "split_front_matter",
    "parse_document",
]

SCHEMA_PATH = Path(__file__).parent / "front_matter_schema.json"

_FRONT_MATTER = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<block>.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


class MetadataError(Exception):
    """Raised when the front-matter block cannot be read or has invalid field types."""


@dataclass(frozen=True)
class ParsedDocument:
    data: dict[str, Any]  # front-matter mapping (dates as ISO strings)
    content: str  # Markdown body


def split_front_matter(text: str) -> tuple[str | None, str]:
    """Return ``(yaml_block, body)``. ``yaml_block`` is None when the document has no front-matter."""
    match = _FRONT_MATTER.match(text)
    if match is None:
        return None, text
    return match.group("block") or "", text[match.end():]


def _stringify_dates(data: dict[str, Any]) -> dict[str, Any]:
    # yaml turns 2024-01-31 into date objects; keep the mapping JSON-like
    out: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (date, datetime)):
            out[str(key)] = value.isoformat()
        else:
            out[str(key)] = value
    return out


def _validate(data: dict[str, Any]) -> None:
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        field = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise MetadataError(f"front matter validation failed for '{field}': {e.message}") from e


def parse_document(text: str) -> ParsedDocument:
    """Parse front-matter and body of a Markdown document.

    Raises:
        MetadataError: If the YAML is invalid, is not a mapping, or a recognized
            field has an unsupported type (list / mapping)
    """
    block, body = split_front_matter(text)
    if block is None:
        return ParsedDocument(data={}, content=body)
    try:
        loaded = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MetadataError(f"invalid front matter yaml: {e}") from e
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise MetadataError(f"front matter must be a mapping, got {type(loaded).__name__}")
    data = _stringify_dates(loaded)
    _validate(data)
    return ParsedDocument(data=data, content=body)
