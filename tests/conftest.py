# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from md_estimate.logging.init import reset_logging

REPO_ROOT = Path(__file__).resolve().parents[1]
SAMPLE_PATH = REPO_ROOT / "samples" / "estimate.md"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "docs").mkdir()
        (p / "out").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("ESTIMATE_OUTPUT_DIR", raising=False)
        monkeypatch.delenv("ESTIMATE_TEMPLATE_DIR", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_markdown() -> str:
    return SAMPLE_PATH.read_text(encoding="utf-8")


@pytest.fixture()
def simple_markdown() -> str:
    return """---
title: Logo
currency: usd
serviceTax: 10
clientName: Bob
---

| Item | Price | Qty |
| ---- | ----- | --- |
| Logo | 100   | 2   |
"""


@pytest.fixture()
def sample_settings_yaml() -> str:
    return """output_directory: ./out
image_type: html
date_format: "MMM DD, YYYY"
quality: 90
error_log_directory: ./logs
"""


@pytest.fixture()
def write_settings(temp_workdir: Path, sample_settings_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "estimate.yml"
    cfg.write_text(sample_settings_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_markdown(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        path = temp_workdir / "docs" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
