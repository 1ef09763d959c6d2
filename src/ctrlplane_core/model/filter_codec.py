"""Conversion between typed filter trees and the API wire format.

Wire shape::

    {"type": str, "operator"?: str, "key"?: str, "value"?: str,
     "not"?: bool, "conditions"?: [<same shape>, ...]}

Every walk here uses an explicit stack so that arbitrarily deep payloads never
hit the interpreter's recursion limit.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional, TypeVar

from ctrlplane_core.config import settings
from ctrlplane_core.contracts.errors import MalformedFilterError
from ctrlplane_core.contracts.filters import (
    COMPARISON_OPERATORS,
    OPERATORS_BY_TYPE,
    FilterNode,
    FilterType,
)
from ctrlplane_core.util.logging import get_logger

logger = get_logger("filters")

ROOT_PATH = "filter"

N = TypeVar("N")
R = TypeVar("R")


def _fold(
    root: N,
    children: Callable[[N, str], Sequence[N]],
    build: Callable[[N, str, list[R]], R],
    path: str = ROOT_PATH,
) -> R:
    """Post-order fold over a tree without recursion.

    ``children(item, path)`` lists an item's children; ``build(item, path,
    results)`` combines an item with the already-built results of its
    children, in order.
    """
    frames: list[tuple[N, str, Sequence[N], list[R]]] = [
        (root, path, children(root, path), [])
    ]
    while True:
        item, item_path, kids, done = frames[-1]
        if len(done) < len(kids):
            child_path = f"{item_path}.conditions[{len(done)}]"
            child = kids[len(done)]
            frames.append((child, child_path, children(child, child_path), []))
            continue
        frames.pop()
        result = build(item, item_path, done)
        if not frames:
            return result
        frames[-1][3].append(result)


def _node_children(node: FilterNode, _path: str) -> Sequence[FilterNode]:
    return node.children


# Normalization


def _normalize_node(node: FilterNode, _path: str, kids: list[FilterNode]) -> FilterNode:
    if node.type is FilterType.comparison:
        value = "" if kids else node.value
        if value != node.value:
            logger.debug(f"Forcing empty value for comparison with {len(kids)} conditions")
        return node.model_copy(update={"value": value, "conditions": kids})
    if node.conditions is None:
        return node
    return node.model_copy(update={"conditions": kids or None})


def normalize(node: FilterNode) -> FilterNode:
    """Return a copy of ``node`` where every comparison with children has ``value == ""``.

    Applying it twice is the same as applying it once.
    """
    return _fold(node, _node_children, _normalize_node)


# Encoding (typed -> wire)


def _check_operator(node: FilterNode, path: str) -> None:
    if node.type is FilterType.comparison:
        if node.operator not in COMPARISON_OPERATORS:
            raise MalformedFilterError(
                f"comparison operator must be one of {sorted(COMPARISON_OPERATORS)}, "
                f"got {node.operator!r}",
                path,
            )
        return
    if not node.operator:
        raise MalformedFilterError(
            f"the 'operator' attribute is required for filter type '{node.type.value}'",
            path,
        )
    allowed = OPERATORS_BY_TYPE.get(node.type)
    if allowed is not None and node.operator not in allowed:
        raise MalformedFilterError(
            f"operator {node.operator!r} is not valid for filter type "
            f"'{node.type.value}' (expected one of {sorted(allowed)})",
            path,
        )


def _encode_node(node: FilterNode, path: str, kids: list[dict[str, Any]]) -> dict[str, Any]:
    _check_operator(node, path)

    if node.type is FilterType.metadata and not node.key:
        raise MalformedFilterError(
            "the 'key' attribute is required for filter type 'metadata'", path
        )

    wire: dict[str, Any] = {"type": node.type.value, "operator": node.operator}
    # Any type may carry a key; only metadata requires one.
    if node.key:
        wire["key"] = node.key

    if node.type is FilterType.comparison:
        if kids:
            wire["value"] = ""
            wire["conditions"] = kids
        elif node.value:
            wire["value"] = node.value
    else:
        if node.conditions:
            raise MalformedFilterError(
                f"filter type '{node.type.value}' cannot have nested conditions", path
            )
        wire["value"] = node.value

    if node.negate:
        wire["not"] = True
    return wire


def encode(node: FilterNode) -> dict[str, Any]:
    """Convert a typed filter tree into its wire map.

    Raises:
        MalformedFilterError: on an invalid operator, a missing metadata key,
            or a leaf carrying nested conditions.
    """
    wire = _fold(normalize(node), _node_children, _encode_node)
    logger.debug(
        f"Encoded filter type={wire['type']} conditions={len(wire.get('conditions', []))}"
    )
    return wire


# Decoding (wire -> typed)


def _optional_str(wire: Mapping[str, Any], field: str, path: str) -> str:
    raw = wire.get(field)
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise MalformedFilterError(
            f"'{field}' must be a string, got {type(raw).__name__}", path
        )
    return raw


def _wire_type(wire: Any, path: str) -> FilterType:
    if not isinstance(wire, Mapping):
        raise MalformedFilterError(
            f"condition is not a valid map (got {type(wire).__name__})", path
        )
    raw = wire.get("type")
    if not isinstance(raw, str) or not raw:
        raise MalformedFilterError("missing or invalid filter type", path)
    try:
        return FilterType(raw)
    except ValueError:
        raise MalformedFilterError(f"unrecognized filter type {raw!r}", path) from None


def _wire_children(wire: Any, path: str) -> Sequence[Any]:
    filter_type = _wire_type(wire, path)
    conditions = wire.get("conditions")
    if conditions is None:
        return []
    if filter_type is not FilterType.comparison:
        logger.warning(
            f"Ignoring conditions on leaf filter of type '{filter_type.value}' at {path}"
        )
        return []
    if isinstance(conditions, (str, bytes)) or not isinstance(conditions, Sequence):
        raise MalformedFilterError(
            f"'conditions' must be a list, got {type(conditions).__name__}", path
        )
    return conditions


def _decode_node(wire: Mapping[str, Any], path: str, kids: list[FilterNode]) -> FilterNode:
    filter_type = _wire_type(wire, path)
    negate = wire.get("not", False)
    if negate is None:
        negate = False
    if not isinstance(negate, bool):
        raise MalformedFilterError(f"'not' must be a boolean, got {type(negate).__name__}", path)

    conditions: Optional[list[FilterNode]] = None
    value = _optional_str(wire, "value", path)
    if filter_type is FilterType.comparison:
        conditions = kids
        if kids:
            value = ""

    return FilterNode(
        type=filter_type,
        operator=_optional_str(wire, "operator", path),
        key=_optional_str(wire, "key", path),
        value=value,
        negate=negate,
        conditions=conditions,
    )


def decode(wire: Mapping[str, Any]) -> FilterNode:
    """Convert a wire map into a normalized typed filter tree.

    Raises:
        MalformedFilterError: when ``type`` is missing or unknown, a condition
            is not a map, or a field has the wrong wire type.
    """
    return normalize(_fold(wire, _wire_children, _decode_node))


# Identity


def _frame(text: str) -> bytes:
    data = text.encode("utf-8")
    return str(len(data)).encode("ascii") + b":" + data


def identity(node: FilterNode, length: Optional[int] = None) -> str:
    """Deterministic content hash of a filter tree.

    Covers type, key, operator, value, negation and the identities of all
    children in order, so any change anywhere in the tree changes the result.
    """
    width = settings.CTRLPLANE_FILTER_ID_LENGTH if length is None else length

    def build(item: FilterNode, _path: str, kids: list[str]) -> str:
        h = hashlib.sha256()
        for text in (item.type.value, item.key, item.operator, item.value):
            h.update(_frame(text))
        h.update(_frame("true" if item.negate else "false"))
        for child_id in kids:
            h.update(_frame(child_id))
        return h.hexdigest()[:width]

    return _fold(normalize(node), _node_children, build)


# Depth guard for typed configuration


def depth(node: FilterNode) -> int:
    """Number of node levels in the tree (a lone leaf has depth 1)."""
    return _fold(node, _node_children, lambda _n, _p, kids: 1 + max(kids, default=0))


def check_depth(node: FilterNode, limit: Optional[int] = None) -> None:
    """Reject configuration trees nested deeper than ``limit`` levels."""
    max_depth = settings.CTRLPLANE_FILTER_MAX_DEPTH if limit is None else limit
    actual = depth(node)
    if actual > max_depth:
        raise MalformedFilterError(
            f"filter is nested {actual} levels deep; the maximum is {max_depth}"
        )
