"""
Field descriptors: what a target accepts, what an item provides.

assignable_fields() answers "does the target declare a field of this exact
name?" from the declarations a class makes instead of probing with hasattr(),
so methods, properties and ClassVar constants are never treated as fields.

to_flat_mapping() turns one source item into the canonical flat mapping used
by both the fill algorithm and the export paths.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from typing import Any, ClassVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from mapper_kernel.domain.protocols import ExportsAll
from mapper_kernel.exceptions import SourceShapeError

#: Class attribute a target type may set to declare its assignable fields.
DECLARED_FIELDS_ATTR = "__mapped_fields__"


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _is_classvar(annotation: Any) -> bool:
    if annotation is ClassVar or typing.get_origin(annotation) is ClassVar:
        return True
    # Unevaluated annotations under `from __future__ import annotations`
    return isinstance(annotation, str) and annotation.startswith(
        ("ClassVar", "typing.ClassVar")
    )


def _annotated_fields(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, annotation in vars(klass).get("__annotations__", {}).items():
            if _is_public(name) and not _is_classvar(annotation) and name not in names:
                names.append(name)
    return names


def _classvar_names(cls: type) -> set[str]:
    names: set[str] = set()
    for klass in cls.__mro__:
        for name, annotation in vars(klass).get("__annotations__", {}).items():
            if _is_classvar(annotation):
                names.add(name)
    return names


def _class_attribute_fields(cls: type) -> list[str]:
    """Public plain-value class attributes: ``code = None`` declares ``code``."""
    skip = _classvar_names(cls)
    names: list[str] = []
    for klass in reversed(cls.__mro__[:-1]):
        for name, value in vars(klass).items():
            if not _is_public(name) or name in skip or name in names:
                continue
            # Methods, properties, slots and ORM attributes are descriptors.
            if callable(value) or hasattr(type(value), "__get__"):
                continue
            names.append(name)
    return names


def _slot_fields(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if _is_public(s) and s not in names)
    return names


def _mapped_columns(obj: Any) -> list[str] | None:
    """Column attribute keys of a SQLAlchemy-mapped instance or class."""
    try:
        insp = sa_inspect(obj)
    except NoInspectionAvailable:
        return None
    mapper = getattr(insp, "mapper", None)
    if mapper is None:
        return None
    return [attr.key for attr in mapper.column_attrs]


def assignable_fields(target: Any) -> frozenset[str]:
    """
    Names the fill algorithm may assign on ``target``.

    Preconditions:
        - ``target`` is an instance, already constructed.
    Postconditions:
        - An explicit ``__mapped_fields__`` declaration is returned verbatim.
        - Otherwise the union of dataclass fields, public class annotations
          and plain-value class attributes over the MRO (ClassVar excluded),
          public ``__slots__`` entries,
          mapped SQLAlchemy columns and public instance attributes.
    """
    cls = type(target)
    declared = getattr(cls, DECLARED_FIELDS_ATTR, None)
    if declared is not None:
        return frozenset(declared)

    names: set[str] = set(_annotated_fields(cls))
    names.update(_class_attribute_fields(cls))
    names.update(_slot_fields(cls))
    if dataclasses.is_dataclass(cls):
        names.update(f.name for f in dataclasses.fields(cls))
    columns = _mapped_columns(target)
    if columns is not None:
        names.update(columns)
    instance_dict = getattr(target, "__dict__", None)
    if instance_dict is not None:
        names.update(k for k in instance_dict if _is_public(k))
    return frozenset(names)


def to_flat_mapping(item: Any) -> dict[str, Any]:
    """
    Read one item as a flat key -> value dict.

    Mappings are copied shallowly (key order kept). ExportsAll payloads are
    exported. SQLAlchemy-mapped instances yield their column values,
    dataclass instances their fields, other objects their public instance
    attributes.

    Raises:
        SourceShapeError: for scalars, strings and other values without fields.
    """
    if isinstance(item, Mapping):
        return dict(item)
    if isinstance(item, ExportsAll):
        return dict(item.export_all())
    if isinstance(item, (str, bytes, bytearray, int, float, complex, bool)) or item is None:
        raise SourceShapeError(type(item).__name__, "a flat mapping")

    columns = _mapped_columns(item)
    if columns is not None:
        return {key: getattr(item, key) for key in columns}
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return {f.name: getattr(item, f.name) for f in dataclasses.fields(item)}

    try:
        attributes = vars(item)
    except TypeError:
        slots = _slot_fields(type(item))
        if not slots:
            raise SourceShapeError(type(item).__name__, "a flat mapping") from None
        return {name: getattr(item, name) for name in slots if hasattr(item, name)}
    return {k: v for k, v in attributes.items() if _is_public(k)}
