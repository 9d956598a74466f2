"""
mapper_kernel -- object mapping engine.

Copies fields from a source (mapping, structured payload, object, sequence
or JSON text) onto instances of a target type, optionally through a chain
of custom mappers, or exports the source as plain data / JSON text.

Architecture:
    mapper_kernel/ never imports mapper_config/. Collaborators (Instantiator,
    payloads, record-like targets) are recognized through the protocols in
    mapper_kernel.domain.protocols.
"""

from mapper_kernel.collection import MappedCollection
from mapper_kernel.container import Container
from mapper_kernel.domain.protocols import (
    ExportsAll,
    Instantiator,
    NamedMapper,
    RecordFillable,
)
from mapper_kernel.exceptions import (
    CircularDependencyError,
    ConfigurationError,
    DependencyResolutionError,
    InstantiationError,
    MalformedSourceError,
    MapperContractError,
    MapperKernelError,
    SerializationError,
    SourceShapeError,
    TypeResolutionError,
)
from mapper_kernel.mapping.chain import ChainPolicy
from mapper_kernel.mapping.engine import Mapper, map_source

__all__ = [
    "ChainPolicy",
    "CircularDependencyError",
    "ConfigurationError",
    "Container",
    "DependencyResolutionError",
    "ExportsAll",
    "InstantiationError",
    "Instantiator",
    "MalformedSourceError",
    "MappedCollection",
    "Mapper",
    "MapperContractError",
    "MapperKernelError",
    "NamedMapper",
    "RecordFillable",
    "SerializationError",
    "SourceShapeError",
    "TypeResolutionError",
    "map_source",
]
