from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..utils.values import DEFAULT_DATE_FORMAT

"""Settings loader.

Responsibilities:
- Load YAML settings (default: config/estimate.yml in the working directory)
- Validate against settings_schema.json (unknown keys rejected)
- Apply defaults for every missing key
- Let ESTIMATE_OUTPUT_DIR / ESTIMATE_TEMPLATE_DIR (typically from .env) override the file
"""

SCHEMA_PATH = Path(__file__).parent / "settings_schema.json"
DEFAULT_CONFIG_PATH = Path("config/estimate.yml")

ENV_OUTPUT_DIR = "ESTIMATE_OUTPUT_DIR"
ENV_TEMPLATE_DIR = "ESTIMATE_TEMPLATE_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class EstimateSettings:
    output_directory: str = "."
    image_type: str = "png"  # png | jpeg | html
    date_format: str = DEFAULT_DATE_FORMAT
    template_directory: str | None = None  # None -> packaged template
    quality: int = 100
    error_log_directory: str = "./logs"


def _validate_settings_schema(data: dict[str, Any]) -> None:
    """Validate settings data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing / not JSON, or the data
            violates it (unknown key, wrong type, out of range value)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"settings schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env(settings: dict[str, Any]) -> dict[str, Any]:
    out = dict(settings)
    if os.getenv(ENV_OUTPUT_DIR):
        out["output_directory"] = os.environ[ENV_OUTPUT_DIR]
    if os.getenv(ENV_TEMPLATE_DIR):
        out["template_directory"] = os.environ[ENV_TEMPLATE_DIR]
    return out


def load_settings(path: Path | None = None) -> EstimateSettings:
    """Load settings from ``path``.

    When ``path`` is None the default location is tried and silently skipped
    if absent. An explicit path that does not exist is an error.

    Raises:
        ConfigError: Missing explicit file, invalid YAML or schema violation
    """
    explicit = path is not None
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"config validation failed: expected a mapping, got {type(loaded).__name__}")
        _validate_settings_schema(loaded)
        data = loaded
    elif explicit:
        raise ConfigError(f"config file not found: {config_path}")

    data = _apply_env(data)
    return EstimateSettings(**data)
