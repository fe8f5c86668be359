from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from plan_import.excel.columns import DEFAULT_COLUMN_PATTERNS
from plan_import.excel.header import DEFAULT_HEADER_KEYWORDS, DEFAULT_SCAN_ROWS

"""Settings loader.

The importer runs with built-in defaults; a YAML file only overrides them.
Responsibilities:
- Load YAML (e.g. config/plan_import.yml)
- Validate against the packaged JSON schema
- Merge with defaults and return a frozen ImporterSettings
"""

SCHEMA_PATH = Path(__file__).parent / "settings_schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection fallback; environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImporterSettings:
    header_keywords: tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    header_scan_rows: int = DEFAULT_SCAN_ROWS
    header_row: int | None = None  # 指定時はキーワード判定をスキップ
    column_patterns: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_COLUMN_PATTERNS)
    )
    column_map: dict[str, str] | None = None  # role -> explicit header label
    null_sentinels: frozenset[str] = frozenset()  # upper-cased
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_settings_schema(data: dict[str, Any]) -> None:
    """Validate settings data against the packaged JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"settings schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"settings validation failed: {e.message}") from e


def settings_from_dict(data: dict[str, Any]) -> ImporterSettings:
    _validate_settings_schema(data)

    header = data.get("header") or {}
    patterns = dict(DEFAULT_COLUMN_PATTERNS)
    for role, values in (data.get("column_patterns") or {}).items():
        patterns[role] = tuple(values)

    column_map = data.get("column_map") or None

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImporterSettings(
        header_keywords=tuple(header.get("keywords", DEFAULT_HEADER_KEYWORDS)),
        header_scan_rows=header.get("scan_rows", DEFAULT_SCAN_ROWS),
        header_row=header.get("row"),
        column_patterns=patterns,
        column_map=dict(column_map) if column_map else None,
        null_sentinels=frozenset(s.strip().upper() for s in data.get("null_sentinels", [])),
        database=db,
    )


def load_settings(path: Path) -> ImporterSettings:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return settings_from_dict(data)
