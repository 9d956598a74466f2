"""
Typed Exception Hierarchy for the Mapper Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from MapperKernelError:

    MapperKernelError (base)
    |
    +-- ConfigurationError
    +-- MapperContractError
    +-- SourceShapeError
    |
    +-- InstantiationError
    |   +-- TypeResolutionError
    |   +-- DependencyResolutionError
    |   +-- CircularDependencyError
    |
    +-- SerializationError
        +-- MalformedSourceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | MAPPER_CONFIGURATION_ERROR  | Chain entry is not a type, name or callable
                | MAPPER_CONTRACT_VIOLATION   | Named mapper has no callable ``map``
                | SOURCE_NOT_ITERABLE         | Source shape does not fit the mode
----------------|-----------------------------|-----------------------------------------
Instantiation   | INSTANTIATION_FAILED        | Generic construction failure
                | TYPE_NOT_RESOLVABLE         | Name is neither bound nor importable
                | DEPENDENCY_NOT_RESOLVABLE   | Constructor parameter cannot be supplied
                | CIRCULAR_DEPENDENCY         | Constructor dependency graph loops
----------------|-----------------------------|-----------------------------------------
Serialization   | SERIALIZATION_FAILED        | Value cannot be encoded as JSON
                | MALFORMED_SOURCE_TEXT       | JSON text source does not parse

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        airports = Mapper.map(payload).collection().to(Airport)
    except MalformedSourceError as e:
        return {"error": e.code, "line": e.line, "column": e.column}
    except InstantiationError as e:
        log.error("cannot build target", extra={"target": e.target})

Errors raised by user-supplied constructors and mappers are never wrapped;
they reach the caller exactly as raised.
"""


class MapperKernelError(Exception):
    """
    Base exception for all mapper kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "MAPPER_KERNEL_ERROR"


# Configuration and contract errors


class ConfigurationError(MapperKernelError):
    """A mapper chain entry (or engine option) is unusable."""

    code: str = "MAPPER_CONFIGURATION_ERROR"

    def __init__(self, entry: object, reason: str):
        self.entry = repr(entry)
        self.reason = reason
        super().__init__(f"Invalid mapper configuration {self.entry}: {reason}")


class MapperContractError(MapperKernelError):
    """A named mapper was resolved but does not expose a callable ``map``."""

    code: str = "MAPPER_CONTRACT_VIOLATION"

    def __init__(self, mapper_name: str):
        self.mapper_name = mapper_name
        super().__init__(
            f"Mapper {mapper_name} must define map(item, target_type)"
        )


class SourceShapeError(MapperKernelError):
    """The source (or one of its items) cannot be read in the current mode."""

    code: str = "SOURCE_NOT_ITERABLE"

    def __init__(self, source_type: str, expected: str):
        self.source_type = source_type
        self.expected = expected
        super().__init__(f"Cannot read {source_type} as {expected}")


# Instantiation errors


class InstantiationError(MapperKernelError):
    """A target or mapper type could not be constructed."""

    code: str = "INSTANTIATION_FAILED"

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot instantiate {target}: {reason}")


class TypeResolutionError(InstantiationError):
    """A name is neither a container binding nor an importable attribute."""

    code: str = "TYPE_NOT_RESOLVABLE"

    def __init__(self, target: str, reason: str = "no binding and not importable"):
        super().__init__(target, reason)


class DependencyResolutionError(InstantiationError):
    """A constructor parameter has no default and no resolvable annotation."""

    code: str = "DEPENDENCY_NOT_RESOLVABLE"

    def __init__(self, target: str, parameter: str):
        self.parameter = parameter
        super().__init__(
            target, f"unresolvable constructor parameter {parameter!r}"
        )


class CircularDependencyError(InstantiationError):
    """Resolving a constructor dependency led back to a type being built."""

    code: str = "CIRCULAR_DEPENDENCY"

    def __init__(self, target: str, chain: list[str]):
        self.chain = chain
        super().__init__(target, "circular dependency: " + " -> ".join(chain))


# Serialization errors


class SerializationError(MapperKernelError):
    """Mapped data cannot be represented as JSON text."""

    code: str = "SERIALIZATION_FAILED"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Serialization failed: {reason}")


class MalformedSourceError(SerializationError):
    """A JSON text source failed to parse."""

    code: str = "MALFORMED_SOURCE_TEXT"

    def __init__(self, reason: str, line: int, column: int, position: int):
        self.line = line
        self.column = column
        self.position = position
        super().__init__(
            f"malformed JSON source at line {line} column {column}: {reason}"
        )
