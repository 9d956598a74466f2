"""Mapping engine: source normalization, mapper chain, default fill, export."""

from mapper_kernel.mapping.chain import ChainPolicy, apply_chain, resolve_entry
from mapper_kernel.mapping.engine import Mapper, map_source
from mapper_kernel.mapping.fill import FillReport, fill_target
from mapper_kernel.mapping.serialization import encode_json, parse_json_text

__all__ = [
    "ChainPolicy",
    "FillReport",
    "Mapper",
    "apply_chain",
    "encode_json",
    "fill_target",
    "map_source",
    "parse_json_text",
    "resolve_entry",
]
