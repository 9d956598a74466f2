"""
Settings Loader (``mapper_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into the frozen dataclasses of
``mapper_config.schema``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required keys.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  document, stored on the parsed ``MapperSettings``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``name``/``target`` in a binding  -> ``KeyError`` propagates.
* Unknown chain policy or log level  -> ``ValueError``.

Example document::

    chain_policy: first_wins
    log_level: DEBUG
    json:
      sort_keys: true
      indent: 2
    bindings:
      - name: airport_mapper
        target: app.mappers:AirportMapper
        shared: true
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from mapper_config.schema import (
    CHAIN_POLICIES,
    LOG_LEVELS,
    BindingDef,
    JsonExportSettings,
    MapperSettings,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def parse_binding(data: dict[str, Any]) -> BindingDef:
    """Parse a BindingDef from a dict."""
    return BindingDef(
        name=str(data["name"]),
        target=str(data["target"]),
        shared=bool(data.get("shared", False)),
    )


def parse_json_settings(data: dict[str, Any] | None) -> JsonExportSettings:
    """Parse JsonExportSettings; missing keys keep their defaults."""
    if not data:
        return JsonExportSettings()
    indent = data.get("indent")
    if indent is not None and (not isinstance(indent, int) or isinstance(indent, bool) or indent < 0):
        raise ValueError(f"json.indent must be a non-negative integer, got {indent!r}")
    return JsonExportSettings(
        ensure_ascii=bool(data.get("ensure_ascii", False)),
        sort_keys=bool(data.get("sort_keys", False)),
        indent=indent,
    )


def parse_settings(data: dict[str, Any]) -> MapperSettings:
    """
    Parse MapperSettings from a dict.

    Raises:
        ValueError: unknown chain_policy or log_level.
        KeyError: a binding without ``name`` or ``target``.
    """
    policy = str(data.get("chain_policy", "last_wins")).strip().lower()
    if policy not in CHAIN_POLICIES:
        raise ValueError(f"chain_policy must be one of {CHAIN_POLICIES}, got {policy!r}")

    log_level = str(data.get("log_level", "INFO")).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {log_level!r}")

    bindings = tuple(parse_binding(b) for b in data.get("bindings") or ())
    names = [b.name for b in bindings]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"duplicate binding names: {duplicates}")

    return MapperSettings(
        chain_policy=policy,
        bindings=bindings,
        json=parse_json_settings(data.get("json")),
        log_level=log_level,
        checksum=compute_checksum(data),
    )


def load_settings(path: Path | str) -> MapperSettings:
    """Load and parse a YAML settings file."""
    return parse_settings(load_yaml_file(Path(path)))


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a settings document."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
