"""Contracts package - Pydantic models and errors for ctrlplane-core."""

from ctrlplane_core.contracts.errors import (
    CtrlplaneModelError,
    FilterNotFoundError,
    InconsistentUnionError,
    MalformedFilterError,
    UnsupportedValueTypeError,
)
from ctrlplane_core.contracts.filters import FilterNode, FilterType
from ctrlplane_core.contracts.result import Diagnostic, ResourceResult, diagnostic
from ctrlplane_core.contracts.values import (
    BooleanLiteral,
    FloatLiteral,
    IntegerLiteral,
    LiteralValue,
    NullLiteral,
    ObjectLiteral,
    ReferenceValue,
    StringLiteral,
    TaggedValue,
)

__all__ = [
    # Errors
    "CtrlplaneModelError",
    "FilterNotFoundError",
    "InconsistentUnionError",
    "MalformedFilterError",
    "UnsupportedValueTypeError",
    # Filters
    "FilterNode",
    "FilterType",
    # Values
    "BooleanLiteral",
    "FloatLiteral",
    "IntegerLiteral",
    "LiteralValue",
    "NullLiteral",
    "ObjectLiteral",
    "ReferenceValue",
    "StringLiteral",
    "TaggedValue",
    # Results
    "Diagnostic",
    "ResourceResult",
    "diagnostic",
]
