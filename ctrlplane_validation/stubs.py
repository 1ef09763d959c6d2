from __future__ import annotations

from ctrlplane_core.contracts.filters import FilterNode, FilterType


def metadata_leaf(key: str = "environment", value: str = "staging", operator: str = "equals") -> FilterNode:
    return FilterNode(type=FilterType.metadata, key=key, operator=operator, value=value)


def kind_leaf(value: str = "Deployment", operator: str = "equals") -> FilterNode:
    return FilterNode(type=FilterType.kind, operator=operator, value=value)


def name_leaf(value: str = "api", operator: str = "contains") -> FilterNode:
    return FilterNode(type=FilterType.name, operator=operator, value=value)


def comparison(operator: str, *conditions: FilterNode, negate: bool = False) -> FilterNode:
    return FilterNode(
        type=FilterType.comparison,
        operator=operator,
        negate=negate,
        conditions=list(conditions),
    )


def build_staging_deployments() -> FilterNode:
    """AND(metadata environment == staging, kind == Deployment)."""
    return comparison("and", metadata_leaf(), kind_leaf())


def build_deep_tree() -> FilterNode:
    """AND(name, OR(kind, AND(metadata, created-at)))."""
    return comparison(
        "and",
        name_leaf(),
        comparison(
            "or",
            kind_leaf("Pod"),
            comparison(
                "and",
                metadata_leaf("team", "platform"),
                FilterNode(
                    type=FilterType.created_at,
                    operator="after",
                    value="2024-01-01T00:00:00Z",
                ),
            ),
        ),
    )


def deep_tree_wire() -> dict:
    return {
        "type": "comparison",
        "operator": "and",
        "value": "",
        "conditions": [
            {"type": "name", "operator": "contains", "value": "api"},
            {
                "type": "comparison",
                "operator": "or",
                "value": "",
                "conditions": [
                    {"type": "kind", "operator": "equals", "value": "Pod"},
                    {
                        "type": "comparison",
                        "operator": "and",
                        "value": "",
                        "conditions": [
                            {
                                "type": "metadata",
                                "operator": "equals",
                                "key": "team",
                                "value": "platform",
                            },
                            {
                                "type": "created-at",
                                "operator": "after",
                                "value": "2024-01-01T00:00:00Z",
                            },
                        ],
                    },
                ],
            },
        ],
    }
