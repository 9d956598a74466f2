"""
Mapper settings schema.

YAML documents are parsed into these frozen dataclasses by the loader and
turned into kernel objects (Container, Mapper factory) by the bridges.
"""

from __future__ import annotations

from dataclasses import dataclass, field

CHAIN_POLICIES = ("last_wins", "first_wins")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class BindingDef:
    """Container binding: alias (or dotted path) -> dotted import path."""

    name: str
    target: str
    shared: bool = False


@dataclass(frozen=True)
class JsonExportSettings:
    """Options forwarded to Mapper.to_json()."""

    ensure_ascii: bool = False
    sort_keys: bool = False
    indent: int | None = None


@dataclass(frozen=True)
class MapperSettings:
    """Complete settings for building mapping engines."""

    chain_policy: str = "last_wins"
    bindings: tuple[BindingDef, ...] = ()
    json: JsonExportSettings = field(default_factory=JsonExportSettings)
    log_level: str = "INFO"
    checksum: str | None = None
