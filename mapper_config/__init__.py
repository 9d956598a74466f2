"""
mapper_config -- YAML settings for the mapper kernel.

Responsibility:
    Parses a settings document (chain policy, container bindings, JSON
    export options, log level) into frozen dataclasses and bridges them to
    kernel objects.  ``get_settings()`` is the entrypoint; the loader is
    exposed for tooling and tests.

Architecture position:
    Sits above ``mapper_kernel``.  The kernel MUST NEVER import from
    ``mapper_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``ValueError`` / ``KeyError`` -- structural validation failures.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mapper_config.loader import load_settings
from mapper_config.schema import BindingDef, JsonExportSettings, MapperSettings

_logger = logging.getLogger("mapper_kernel.config")

_DEFAULT_SETTINGS_FILE = Path(__file__).parent / "defaults.yaml"


def get_settings(path: Path | str | None = None) -> MapperSettings:
    """
    Load settings from ``path``, or the bundled defaults when omitted.

    Emits a ``MAPPER_CONFIG_TRACE`` log entry with the source file and
    checksum of the loaded document.
    """
    source = Path(path) if path is not None else _DEFAULT_SETTINGS_FILE
    settings = load_settings(source)
    _logger.info(
        "MAPPER_CONFIG_TRACE",
        extra={
            "settings_file": str(source),
            "checksum": settings.checksum,
            "chain_policy": settings.chain_policy,
            "binding_count": len(settings.bindings),
        },
    )
    return settings


__all__ = [
    "BindingDef",
    "JsonExportSettings",
    "MapperSettings",
    "get_settings",
    "load_settings",
]
