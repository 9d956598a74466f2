"""
Source normalization.

normalize_source() runs once, at engine construction: a structured payload
(ExportsAll) becomes its exported mapping, anything else is kept as given.
JSON text is left untouched until an operation needs it (resolve_text()).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from mapper_kernel.collection import MappedCollection
from mapper_kernel.domain.protocols import ExportsAll
from mapper_kernel.exceptions import SourceShapeError
from mapper_kernel.mapping.serialization import parse_json_text

_TEXT_TYPES = (str, bytes, bytearray)


def normalize_source(raw: Any) -> Any:
    """Exported mapping for ExportsAll payloads, the raw value otherwise."""
    if isinstance(raw, ExportsAll) and not isinstance(raw, Mapping):
        return dict(raw.export_all())
    return raw


def describe_source(source: Any) -> str:
    """Short kind label for logs."""
    if isinstance(source, _TEXT_TYPES):
        return "text"
    if isinstance(source, Mapping):
        return "mapping"
    if isinstance(source, MappedCollection):
        return "collection"
    if isinstance(source, (list, tuple)):
        return "sequence"
    if isinstance(source, Iterator):
        return "iterator"
    return "object"


def resolve_text(source: Any) -> Any:
    """
    Parse a text source; pass anything else through.

    One-shot iterators are materialized so every terminal operation sees the
    same items.
    """
    if isinstance(source, _TEXT_TYPES):
        return parse_json_text(source)
    if isinstance(source, Iterator):
        return tuple(source)
    return source


def iter_items(source: Any) -> Iterable[Any]:
    """
    Items of a source in collection mode, in order.

    A mapping yields its values. A MappedCollection yields its own items, so
    mapping it again produces one collection, not a nested one.

    Raises:
        SourceShapeError: for text, scalars and other non-iterables.
    """
    if isinstance(source, Mapping):
        return source.values()
    if isinstance(source, _TEXT_TYPES) or not isinstance(source, Iterable):
        raise SourceShapeError(type(source).__name__, "a collection of items")
    return source
