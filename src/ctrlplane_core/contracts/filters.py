"""Typed filter tree used to select the resources an entity applies to."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FilterType(str, Enum):
    comparison = "comparison"
    name = "name"
    kind = "kind"
    identifier = "identifier"
    metadata = "metadata"
    created_at = "created-at"
    last_sync = "last-sync"
    selector = "selector"


# Operator vocabulary per node kind


COMPARISON_OPERATORS = frozenset({"and", "or"})

STRING_OPERATORS = frozenset({"equals", "contains", "starts-with", "ends-with", "regex"})

DATE_OPERATORS = frozenset({"before", "after", "before-or-on", "after-or-on"})

OPERATORS_BY_TYPE: dict[FilterType, frozenset[str]] = {
    FilterType.comparison: COMPARISON_OPERATORS,
    FilterType.name: STRING_OPERATORS,
    FilterType.kind: STRING_OPERATORS,
    FilterType.identifier: STRING_OPERATORS,
    FilterType.metadata: STRING_OPERATORS,
    FilterType.created_at: DATE_OPERATORS,
    FilterType.last_sync: DATE_OPERATORS,
}


class FilterNode(BaseModel):
    """One node of a filter tree.

    Comparison nodes combine ``conditions`` with ``and``/``or``; every other
    type is a leaf comparing a single resource attribute against ``value``.
    ``key`` is required on metadata leaves. Configuration may spell
    ``negate`` as ``not``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: FilterType
    operator: str = ""
    key: str = ""
    value: str = ""
    negate: bool = Field(default=False, alias="not")
    conditions: Optional[list[FilterNode]] = None

    @model_validator(mode="after")
    def _init_conditions(self) -> FilterNode:
        # Comparison nodes always carry a children slot.
        if self.type is FilterType.comparison and self.conditions is None:
            object.__setattr__(self, "conditions", [])
        return self

    @property
    def is_comparison(self) -> bool:
        return self.type is FilterType.comparison

    @property
    def children(self) -> list[FilterNode]:
        return self.conditions or []


FilterNode.model_rebuild()
