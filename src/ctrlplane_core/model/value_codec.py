"""Conversion between dynamic values and the tagged literal/reference union.

The dynamic side is what configuration and the API exchange: a bare
scalar/object for literals, or ``{"reference": str, "path": [str, ...]}`` for
references. Arrays are not representable anywhere in a value.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from typing import Any, assert_never

from ctrlplane_core.contracts.errors import InconsistentUnionError, UnsupportedValueTypeError
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


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks a configuration attribute that was not set at all, as opposed to null.
UNSET: Any = _Unset()

_REFERENCE_KEYS = frozenset({"reference", "path"})


def _as_reference(raw: Mapping[Any, Any]) -> ReferenceValue | None:
    if set(raw.keys()) != _REFERENCE_KEYS:
        return None
    reference, path = raw["reference"], raw["path"]
    if not isinstance(reference, str) or not reference:
        return None
    if isinstance(path, (str, bytes)) or not isinstance(path, (list, tuple)):
        return None
    if not all(isinstance(p, str) for p in path):
        return None
    return ReferenceValue(reference=reference, path=list(path))


def literal_from_dynamic(raw: Any, path: str = "value") -> LiteralValue:
    """Convert a scalar or string-keyed mapping into a literal.

    Whole-number floats collapse to integers; arrays fail at any depth.
    """
    if raw is None:
        return NullLiteral()
    # bool is an Integral, so it has to be checked first.
    if isinstance(raw, bool):
        return BooleanLiteral(value=raw)
    if isinstance(raw, str):
        return StringLiteral(value=raw)
    if isinstance(raw, numbers.Integral):
        return IntegerLiteral(value=int(raw))
    if isinstance(raw, numbers.Real):
        as_float = float(raw)
        if as_float.is_integer():
            return IntegerLiteral(value=int(as_float))
        return FloatLiteral(value=as_float)
    if isinstance(raw, Mapping):
        members: dict[str, LiteralValue] = {}
        for key, member in raw.items():
            if not isinstance(key, str):
                raise UnsupportedValueTypeError(
                    f"object key of type {type(key).__name__}", path
                )
            members[key] = literal_from_dynamic(member, f"{path}.{key}")
        return ObjectLiteral(value=members)
    raise UnsupportedValueTypeError(type(raw).__name__, path)


def from_dynamic(raw: Any, path: str = "value") -> TaggedValue:
    """Convert a dynamic value into a ``TaggedValue``.

    Raises:
        UnsupportedValueTypeError: for lists and any other unrepresentable type.
    """
    if isinstance(raw, Mapping):
        reference = _as_reference(raw)
        if reference is not None:
            return TaggedValue(reference=reference)
    return TaggedValue(literal=literal_from_dynamic(raw, path))


def literal_to_dynamic(literal: LiteralValue) -> Any:
    match literal:
        case NullLiteral():
            return None
        case (
            BooleanLiteral(value=v)
            | StringLiteral(value=v)
            | IntegerLiteral(value=v)
            | FloatLiteral(value=v)
        ):
            return v
        case ObjectLiteral(value=members):
            return {key: literal_to_dynamic(member) for key, member in members.items()}
        case _:
            assert_never(literal)


def to_dynamic(value: TaggedValue) -> Any:
    """Inverse of ``from_dynamic``."""
    if value.reference is not None:
        return {"reference": value.reference.reference, "path": list(value.reference.path)}
    if value.literal is not None:
        return literal_to_dynamic(value.literal)
    raise InconsistentUnionError("value has neither a literal nor a reference populated")


def tagged_value_from_config(
    literal_value: Any = UNSET,
    reference_value: Any = UNSET,
) -> TaggedValue:
    """Build a value from the two mutually exclusive configuration attributes.

    ``reference_value`` is a ``ReferenceValue`` or a ``{"reference", "path"}``
    mapping. Leaving both unset, or setting both, is an error; a literal of
    ``None`` counts as set.
    """
    has_literal = literal_value is not UNSET
    has_reference = reference_value is not UNSET and reference_value is not None
    if has_literal and has_reference:
        raise InconsistentUnionError(
            "only one of literal_value or reference_value may be specified"
        )
    if not has_literal and not has_reference:
        raise InconsistentUnionError(
            "exactly one of literal_value or reference_value must be specified"
        )

    if has_reference:
        if isinstance(reference_value, ReferenceValue):
            return TaggedValue(reference=reference_value)
        if isinstance(reference_value, Mapping):
            reference = _as_reference(reference_value)
            if reference is not None:
                return TaggedValue(reference=reference)
        raise UnsupportedValueTypeError(type(reference_value).__name__, "reference_value")

    return TaggedValue(literal=literal_from_dynamic(literal_value, "literal_value"))
