"""
Config -> Kernel Bridges.

Functions that turn MapperSettings into kernel objects. These live in
mapper_config (the producer) because the kernel must NEVER import
mapper_config.

Usage:
    from mapper_config import get_settings
    from mapper_config.bridges import build_container, build_mapper_factory

    settings = get_settings(Path("mapper.yaml"))
    make_mapper = build_mapper_factory(settings)
    airports = make_mapper(rows).collection().to(Airport)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from mapper_config.schema import MapperSettings
from mapper_kernel.container import Container
from mapper_kernel.logging_config import configure_logging
from mapper_kernel.mapping.chain import ChainPolicy
from mapper_kernel.mapping.engine import Mapper


def build_container(settings: MapperSettings) -> Container:
    """
    Container with every configured binding registered.

    Targets are dotted paths and are imported lazily, on first construct().
    """
    container = Container()
    for binding in settings.bindings:
        container.bind(binding.name, binding.target, shared=binding.shared)
    return container


def build_mapper_factory(
    settings: MapperSettings,
    container: Container | None = None,
) -> Callable[[Any], Mapper]:
    """
    Factory producing engines that share one configured container.

    Each call returns a new, independent Mapper; only the container (and so
    its shared bindings) is common.
    """
    container = container if container is not None else build_container(settings)
    policy = ChainPolicy.parse(settings.chain_policy)
    json_options = asdict(settings.json)

    def make_mapper(source: Any) -> Mapper:
        return Mapper(
            source,
            container,
            chain_policy=policy,
            json_options=json_options,
        )

    return make_mapper


def apply_logging(settings: MapperSettings, **kwargs: Any) -> None:
    """Configure kernel logging at the configured level."""
    configure_logging(level=logging.getLevelName(settings.log_level), **kwargs)
