"""Capability protocols and field descriptors. ZERO I/O."""

from mapper_kernel.domain.fields import (
    DECLARED_FIELDS_ATTR,
    assignable_fields,
    to_flat_mapping,
)
from mapper_kernel.domain.protocols import (
    ExportsAll,
    Instantiator,
    NamedMapper,
    RecordFillable,
)

__all__ = [
    "DECLARED_FIELDS_ATTR",
    "ExportsAll",
    "Instantiator",
    "NamedMapper",
    "RecordFillable",
    "assignable_fields",
    "to_flat_mapping",
]
