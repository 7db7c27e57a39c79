from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from md_estimate.models.error_record import ErrorRecord

"""Error log JSON schema contract test."""

SCHEMA_PATH = pathlib.Path(__file__).parent / "error_log_schema.json"


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example(schema):
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "estimate.md",
        "row": 2,
        "column": "price",
        "error_type": "INVALID_PRICE",
        "message": "Object 2: Invalid Price",
    }
    jsonschema.validate(record, schema)


def test_error_log_schema_rejects_extra_key(schema):
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "estimate.md",
        "row": -1,
        "column": "",
        "error_type": "NO_TABLE",
        "message": "Please provide an estimate table in the markdown content.",
        "extra": "not allowed",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, schema)


@pytest.mark.parametrize(
    "record",
    [
        ErrorRecord.create("estimate.md", 3, "INVALID_QTY", "Object 3: Invalid Qty", column="qty"),
        ErrorRecord.create("estimate.md", -1, "MISSING_COLUMN", "Missing expected column 'price'", column="price"),
        ErrorRecord.create("estimate.md", -1, "TEMPLATE_ERROR", "HTML template file is missing."),
    ],
)
def test_error_record_json_line_matches_schema(schema, record: ErrorRecord):
    jsonschema.validate(json.loads(record.to_json_line()), schema)
