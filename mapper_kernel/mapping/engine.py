"""
Mapping engine: turn a source value into target objects or plain data.

Usage::

    airport = Mapper.map({"code": "LPK", "city": "Lipetsk"}).to(Airport)

    airports = (
        Mapper.map(rows)
        .collection()
        .with_mappers(AirportMapper)
        .to(Airport)
    )

    payload = Mapper.map(request_payload).to_json()

An engine is configure-then-execute: build it, chain collection() and
with_mappers(), then call one of to(), to_array(), to_json(). It holds no
locks and shares nothing with other engines.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from mapper_kernel.collection import MappedCollection
from mapper_kernel.container import Container, type_name
from mapper_kernel.domain.fields import to_flat_mapping
from mapper_kernel.domain.protocols import Instantiator
from mapper_kernel.exceptions import ConfigurationError, MapperKernelError
from mapper_kernel.logging_config import LogContext, get_logger
from mapper_kernel.mapping.chain import ChainPolicy, apply_chain
from mapper_kernel.mapping.fill import fill_target
from mapper_kernel.mapping.serialization import encode_json
from mapper_kernel.mapping.source import (
    describe_source,
    iter_items,
    normalize_source,
    resolve_text,
)

logger = get_logger("mapping.engine")

_UNRESOLVED = object()

_JSON_OPTION_KEYS = frozenset({"ensure_ascii", "sort_keys", "indent"})


def _check_json_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy of ``options`` restricted to what encode_json() accepts."""
    options = dict(options or {})
    unknown = sorted(set(options) - _JSON_OPTION_KEYS, key=str)
    if unknown:
        raise ConfigurationError(
            unknown, f"unknown json option, expected any of {sorted(_JSON_OPTION_KEYS)}"
        )
    return options


class Mapper:
    """
    Object mapping engine.

    Contract:
        - The source is normalized once, here; ExportsAll payloads are
          replaced by their exported mapping. Construction does not validate
          the source; an unknown chain policy or json option raises
          ConfigurationError here.
        - JSON text is parsed on first use and the parsed value is reused.
        - with_mappers() replaces the chain; an empty chain means default fill.
    """

    def __init__(
        self,
        source: Any,
        instantiator: Instantiator | None = None,
        *,
        chain_policy: ChainPolicy | str = ChainPolicy.LAST_WINS,
        json_options: Mapping[str, Any] | None = None,
    ):
        self._source = normalize_source(source)
        self._instantiator: Instantiator = (
            instantiator if instantiator is not None else Container()
        )
        self._chain_policy = ChainPolicy.parse(chain_policy)
        self._json_options = _check_json_options(json_options)
        self._is_collection = False
        self._mappers: tuple[Any, ...] = ()
        self._resolved: Any = _UNRESOLVED
        self._target_type: Any = None
        self.mapping_id = str(uuid4())

        logger.debug(
            "mapper_created",
            extra={
                "mapping_id": self.mapping_id,
                "source_kind": describe_source(self._source),
            },
        )

    @classmethod
    def map(cls, source: Any, instantiator: Instantiator | None = None, **options: Any) -> Mapper:
        """Create a new engine for ``source``."""
        return cls(source, instantiator, **options)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def source(self) -> Any:
        """The normalized source, as stored at construction."""
        return self._source

    @property
    def is_collection(self) -> bool:
        return self._is_collection

    @property
    def mappers(self) -> tuple[Any, ...]:
        return self._mappers

    @property
    def chain_policy(self) -> ChainPolicy:
        return self._chain_policy

    @property
    def instantiator(self) -> Instantiator:
        return self._instantiator

    @property
    def target_type(self) -> Any:
        """Target type of the to() call in progress, else None."""
        return self._target_type

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def collection(self) -> Mapper:
        """Treat the source as an ordered sequence of items. Idempotent."""
        if not self._is_collection:
            self._is_collection = True
            logger.debug("collection_mode_enabled", extra={"mapping_id": self.mapping_id})
        return self

    def with_mappers(self, *mappers: Any) -> Mapper:
        """Replace the custom mapper chain. Entries are checked when used."""
        self._mappers = tuple(mappers)
        logger.debug(
            "mapper_chain_configured",
            extra={"mapping_id": self.mapping_id, "count": len(self._mappers)},
        )
        return self

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def to(self, target_type: Any) -> Any:
        """
        Map the source to ``target_type``.

        Returns one mapped value, or a MappedCollection (one result per
        item, same order) in collection mode.

        Raises:
            MalformedSourceError: text source is not valid JSON.
            SourceShapeError: the source does not fit the mode.
            ConfigurationError / MapperContractError: bad chain entry.
            InstantiationError: target or mapper cannot be built.
        """
        target_name = type_name(target_type)
        with LogContext.bind(mapping_id=self.mapping_id, target_type=target_name):
            logger.debug(
                "mapping_started",
                extra={"collection": self._is_collection, "mappers": len(self._mappers)},
            )
            self._target_type = target_type
            try:
                source = self._resolve()
                if self._is_collection:
                    result: Any = MappedCollection(
                        self._map_item(item, target_type) for item in iter_items(source)
                    )
                    count = len(result)
                else:
                    result = self._map_item(source, target_type)
                    count = 1
            finally:
                self._target_type = None
            logger.debug("mapping_completed", extra={"items": count})
            return result

    def to_array(self) -> Any:
        """
        The source as plain data, without building any target.

        Returns a flat dict in single mode, a list of flat dicts in
        collection mode.
        """
        source = self._resolve()
        if self._is_collection:
            return [to_flat_mapping(item) for item in iter_items(source)]
        return to_flat_mapping(source)

    def to_json(
        self,
        *,
        ensure_ascii: bool | None = None,
        sort_keys: bool | None = None,
        indent: int | None = None,
    ) -> str:
        """
        to_array() serialized as JSON text.

        Raises:
            SerializationError: a value cannot be encoded; nothing is returned.
        """
        options = dict(self._json_options)
        for key, value in (("ensure_ascii", ensure_ascii), ("sort_keys", sort_keys), ("indent", indent)):
            if value is not None:
                options[key] = value
        data = self.to_array()
        try:
            return encode_json(data, **options)
        except MapperKernelError as exc:
            logger.warning(
                "serialization_failed",
                extra={"mapping_id": self.mapping_id, "error_code": exc.code},
            )
            raise

    to_text = to_json

    # ------------------------------------------------------------------
    # Per-item algorithm
    # ------------------------------------------------------------------

    def fill(self, target: Any, item: Any) -> Any:
        """
        Default fill of an existing ``target`` from ``item``.

        Public so inline mappers can build a target their own way and still
        reuse the field copy.
        """
        attributes = to_flat_mapping(item)
        target, report = fill_target(target, attributes)
        if report.delegated:
            logger.debug("record_fill_delegated", extra={"fields": len(attributes)})
        else:
            logger.debug(
                "default_fill_applied",
                extra={"assigned": list(report.assigned), "dropped": list(report.dropped)},
            )
        return target

    def _map_item(self, item: Any, target_type: Any) -> Any:
        if self._mappers:
            return apply_chain(
                self._mappers,
                self._chain_policy,
                engine=self,
                item=item,
                target_type=target_type,
                instantiator=self._instantiator,
            )
        target = self._instantiator.construct(target_type)
        return self.fill(target, item)

    def _resolve(self) -> Any:
        if self._resolved is _UNRESOLVED:
            try:
                self._resolved = resolve_text(self._source)
            except MapperKernelError as exc:
                logger.warning(
                    "source_text_malformed",
                    extra={"mapping_id": self.mapping_id, "error_code": exc.code},
                )
                raise
            if describe_source(self._source) == "text":
                logger.debug(
                    "source_text_parsed",
                    extra={
                        "mapping_id": self.mapping_id,
                        "parsed_kind": describe_source(self._resolved),
                    },
                )
        return self._resolved


def map_source(source: Any, instantiator: Instantiator | None = None, **options: Any) -> Mapper:
    """Shorthand for ``Mapper.map(source)``."""
    return Mapper.map(source, instantiator, **options)
