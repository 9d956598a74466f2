"""
Module: mapper_kernel.container
Responsibility: The default Instantiator.  Builds target and mapper types by
    class, by bound alias, or by dotted import path, autowiring constructor
    parameters from their type annotations.
Architecture position: Kernel.  Imports only from exceptions and
    logging_config; the mapping engine receives a Container (or any other
    Instantiator) at construction and never reaches for a global one.

Invariants enforced:
    - Each Container is independent; there is no process-wide instance.
    - A shared binding is built at most once per Container.
    - Construction failures raised by the container itself are always an
      InstantiationError subclass.  Exceptions raised inside a target's own
      constructor propagate unchanged.

Failure modes:
    - TypeResolutionError if a name is neither bound nor importable.
    - DependencyResolutionError if a constructor parameter has no default and
      its annotation cannot be resolved.
    - CircularDependencyError if autowiring re-enters a type being built.
"""

from __future__ import annotations

import importlib
import inspect
import typing
from dataclasses import dataclass
from typing import Any

from mapper_kernel.exceptions import (
    CircularDependencyError,
    DependencyResolutionError,
    InstantiationError,
    TypeResolutionError,
)
from mapper_kernel.logging_config import get_logger

logger = get_logger("container")

# Annotations that can never be autowired.
_SCALAR_TYPES: frozenset[type] = frozenset(
    {str, bytes, int, float, bool, complex, list, dict, tuple, set, frozenset}
)


@dataclass(frozen=True)
class _Binding:
    """A registered recipe for producing an abstract."""

    concrete: Any  # type, callable(container) or dotted path
    shared: bool = False


def type_name(target: Any) -> str:
    """Human-readable name for a class, alias or dotted path."""
    if isinstance(target, str):
        return target
    module = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", None) or repr(target)
    return f"{module}.{qualname}" if module else qualname


def import_string(path: str) -> Any:
    """
    Import an attribute from a dotted path.

    Accepts ``package.module:Attr`` and ``package.module.Attr``.

    Raises:
        TypeResolutionError: if the module or attribute does not exist.
    """
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")
    if not module_path or not attr_path:
        raise TypeResolutionError(path, "not a dotted import path")
    try:
        obj: Any = importlib.import_module(module_path)
    except ImportError as exc:
        raise TypeResolutionError(path, f"cannot import module {module_path!r}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TypeResolutionError(
                path, f"module {module_path!r} has no attribute {attr_path!r}"
            ) from exc
    return obj


class Container:
    """
    Instantiator with bindings and constructor autowiring.

    Usage::

        container = Container()
        container.singleton(Clock, SystemClock)
        container.bind("airport_mapper", "app.mappers:AirportMapper")

        airport = container.construct(Airport)          # by class
        mapper = container.construct("airport_mapper")  # by alias
    """

    def __init__(self) -> None:
        self._bindings: dict[Any, _Binding] = {}
        self._instances: dict[Any, Any] = {}
        self._building: list[Any] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def bind(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> Container:
        """Register how ``abstract`` is built. ``concrete`` defaults to itself."""
        self._bindings[abstract] = _Binding(
            concrete=abstract if concrete is None else concrete,
            shared=shared,
        )
        self._instances.pop(abstract, None)
        logger.debug(
            "binding_registered",
            extra={"abstract": type_name(abstract), "shared": shared},
        )
        return self

    def singleton(self, abstract: Any, concrete: Any = None) -> Container:
        """Register a shared binding: built once, then reused."""
        return self.bind(abstract, concrete, shared=True)

    def instance(self, abstract: Any, obj: Any) -> Container:
        """Register an already-built object for ``abstract``."""
        self._bindings[abstract] = _Binding(concrete=obj, shared=True)
        self._instances[abstract] = obj
        return self

    def bound(self, abstract: Any) -> bool:
        return abstract in self._bindings

    # ------------------------------------------------------------------
    # Instantiator
    # ------------------------------------------------------------------

    def construct(self, target: Any) -> Any:
        """
        Build ``target``: a class, a bound alias, or a dotted import path.

        Postconditions:
            - Shared bindings return the same object on every call.
            - Unbound classes are built fresh with autowired parameters.
        """
        if target is Container or target is type(self):
            return self
        if target in self._instances:
            return self._instances[target]

        binding = self._bindings.get(target)
        if binding is not None:
            obj = self._build_binding(target, binding)
            if binding.shared:
                self._instances[target] = obj
            return obj

        if isinstance(target, str):
            return self.construct(import_string(target))
        if isinstance(target, type):
            return self._autowire(target)
        raise TypeResolutionError(type_name(target), "not a class, alias or import path")

    def _build_binding(self, abstract: Any, binding: _Binding) -> Any:
        concrete = binding.concrete
        if isinstance(concrete, str):
            concrete = import_string(concrete)
        if concrete is abstract:
            if isinstance(concrete, type):
                return self._autowire(concrete)
            raise TypeResolutionError(type_name(abstract), "binding points at itself")
        if isinstance(concrete, type):
            return self.construct(concrete)
        if callable(concrete):
            return concrete(self)
        return concrete

    def _autowire(self, cls: type) -> Any:
        if cls in self._building:
            chain = [type_name(c) for c in self._building] + [type_name(cls)]
            raise CircularDependencyError(type_name(cls), chain)
        if inspect.isabstract(cls):
            raise InstantiationError(type_name(cls), "abstract class")

        self._building.append(cls)
        try:
            kwargs = self._resolve_parameters(cls)
        finally:
            self._building.pop()

        obj = cls(**kwargs)
        logger.debug(
            "type_constructed",
            extra={"target": type_name(cls), "autowired": sorted(kwargs)},
        )
        return obj

    def _resolve_parameters(self, cls: type) -> dict[str, Any]:
        if cls.__init__ is object.__init__:
            return {}
        try:
            signature = inspect.signature(cls.__init__)
        except (TypeError, ValueError):
            return {}
        try:
            hints = typing.get_type_hints(cls.__init__)
        except (NameError, TypeError):
            # Unresolvable forward references fall back to raw annotations.
            hints = {}

        kwargs: dict[str, Any] = {}
        for index, (name, param) in enumerate(signature.parameters.items()):
            if index == 0 or param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                continue
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                if param.default is inspect.Parameter.empty:
                    raise DependencyResolutionError(type_name(cls), name)
                continue
            annotation = hints.get(name, param.annotation)
            dependency = self._dependency_for(annotation)
            if dependency is None:
                if param.default is inspect.Parameter.empty:
                    raise DependencyResolutionError(type_name(cls), name)
                continue
            try:
                kwargs[name] = self.construct(dependency)
            except CircularDependencyError:
                raise
            except InstantiationError:
                if param.default is inspect.Parameter.empty:
                    raise
        return kwargs

    def _dependency_for(self, annotation: Any) -> Any:
        """Pick the type to build for an annotation, or None."""
        if annotation is inspect.Parameter.empty:
            return None
        if isinstance(annotation, str):
            # Unresolved forward reference: only usable as a bound alias.
            return annotation if annotation in self._bindings else None
        origin = typing.get_origin(annotation)
        if origin is not None:
            # Optional[X] / X | None: autowire X.
            args = [a for a in typing.get_args(annotation) if a is not type(None)]
            if len(args) == 1:
                return self._dependency_for(args[0])
            return None
        if annotation in self._bindings:
            return annotation
        if isinstance(annotation, type) and annotation not in _SCALAR_TYPES:
            return annotation
        return None
