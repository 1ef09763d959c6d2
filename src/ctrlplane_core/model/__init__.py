"""Conversion functions and the filter registry."""

from ctrlplane_core.model.filter_codec import check_depth, decode, encode, identity, normalize
from ctrlplane_core.model.registry import FilterRegistry, get_registry
from ctrlplane_core.model.value_codec import (
    UNSET,
    from_dynamic,
    tagged_value_from_config,
    to_dynamic,
)

__all__ = [
    "check_depth",
    "decode",
    "encode",
    "identity",
    "normalize",
    "FilterRegistry",
    "get_registry",
    "UNSET",
    "from_dynamic",
    "tagged_value_from_config",
    "to_dynamic",
]
