from __future__ import annotations

import json

import pytest

from ctrlplane_core.contracts.errors import MalformedFilterError
from ctrlplane_core.contracts.filters import FilterNode, FilterType
from ctrlplane_core.model.filter_codec import check_depth, decode, depth, encode, normalize
from ctrlplane_validation.stubs import (
    comparison,
    deep_tree_wire,
    kind_leaf,
    metadata_leaf,
    name_leaf,
)


def test_staging_deployments_encodes_to_expected_wire(staging_tree: FilterNode) -> None:
    wire = encode(staging_tree)

    assert wire["type"] == "comparison"
    assert wire["operator"] == "and"
    assert wire["value"] == ""
    assert "not" not in wire
    assert len(wire["conditions"]) == 2
    assert wire["conditions"][0] == {
        "type": "metadata",
        "operator": "equals",
        "key": "environment",
        "value": "staging",
    }
    assert wire["conditions"][1] == {
        "type": "kind",
        "operator": "equals",
        "value": "Deployment",
    }


def test_staging_deployments_decodes_back_exactly(staging_tree: FilterNode) -> None:
    assert decode(encode(staging_tree)) == staging_tree


def test_deep_tree_decodes_with_leaf_counts_per_level() -> None:
    node = decode(deep_tree_wire())

    assert len(node.children) == 2
    assert node.children[0].type is FilterType.name
    level2 = node.children[1]
    assert level2.operator == "or"
    assert len(level2.children) == 2
    level3 = level2.children[1]
    assert level3.operator == "and"
    assert len(level3.children) == 2
    assert level3.children[1].type is FilterType.created_at


def test_deep_tree_reencodes_identically() -> None:
    wire = deep_tree_wire()
    again = encode(decode(wire))
    assert json.dumps(again, sort_keys=True) == json.dumps(wire, sort_keys=True)


def test_deep_tree_round_trip(deep_tree: FilterNode) -> None:
    assert decode(encode(deep_tree)) == normalize(deep_tree)


@pytest.mark.parametrize(
    "tree",
    [
        name_leaf(),
        FilterNode(type=FilterType.last_sync, operator="before-or-on", value="2024-06-01"),
        FilterNode(type=FilterType.identifier, operator="regex", value="^svc-[a-z]+$", negate=True),
        FilterNode(type=FilterType.selector, operator="matches", key="tier", value="gold"),
        comparison("or"),
        comparison("and", comparison("or", kind_leaf()), negate=True),
    ],
)
def test_round_trip_matches_normalized_tree(tree: FilterNode) -> None:
    assert decode(encode(tree)) == normalize(tree)


def test_normalize_forces_empty_value_on_comparisons_with_children() -> None:
    tree = FilterNode(
        type=FilterType.comparison,
        operator="and",
        value="leftover",
        conditions=[
            FilterNode(
                type=FilterType.comparison,
                operator="or",
                value="nested leftover",
                conditions=[kind_leaf()],
            )
        ],
    )

    fixed = normalize(tree)

    assert fixed.value == ""
    assert fixed.children[0].value == ""
    assert fixed.children[0].children[0].value == "Deployment"
    # the input is untouched
    assert tree.value == "leftover"


def test_normalize_is_idempotent(deep_tree: FilterNode) -> None:
    once = normalize(deep_tree)
    assert normalize(once) == once


def test_normalize_keeps_value_on_empty_comparison() -> None:
    tree = FilterNode(type=FilterType.comparison, operator="and", value="x")
    assert normalize(tree).value == "x"


def test_comparison_always_has_conditions_slot() -> None:
    node = FilterNode(type=FilterType.comparison, operator="or")
    assert node.conditions == []
    assert name_leaf().conditions is None


def test_empty_comparison_passes_through() -> None:
    wire = encode(comparison("or"))
    assert wire == {"type": "comparison", "operator": "or"}
    assert decode(wire).children == []


def test_negated_leaf_emits_not() -> None:
    wire = encode(FilterNode(type=FilterType.kind, operator="equals", value="Pod", negate=True))
    assert wire["not"] is True


def test_regex_value_is_opaque() -> None:
    leaf = FilterNode(type=FilterType.name, operator="regex", value="([unclosed")
    assert encode(leaf)["value"] == "([unclosed"


def test_decode_applies_defaults() -> None:
    node = decode({"type": "kind"})
    assert node.operator == ""
    assert node.key == ""
    assert node.value == ""
    assert node.negate is False


def test_decode_forces_empty_value_for_comparison_with_conditions() -> None:
    node = decode(
        {
            "type": "comparison",
            "operator": "and",
            "value": "ignored",
            "conditions": [{"type": "kind", "operator": "equals", "value": "Pod"}],
        }
    )
    assert node.value == ""


# Encode failures


def test_encode_rejects_bad_comparison_operator() -> None:
    with pytest.raises(MalformedFilterError, match="comparison operator"):
        encode(comparison("xor", kind_leaf()))


def test_encode_rejects_missing_leaf_operator_with_path() -> None:
    tree = comparison("and", kind_leaf(), FilterNode(type=FilterType.name, value="api"))
    with pytest.raises(MalformedFilterError) as exc_info:
        encode(tree)
    assert exc_info.value.path == "filter.conditions[1]"
    assert "'operator' attribute is required" in str(exc_info.value)


def test_encode_rejects_operator_from_wrong_family() -> None:
    with pytest.raises(MalformedFilterError, match="not valid for filter type 'created-at'"):
        encode(FilterNode(type=FilterType.created_at, operator="equals", value="2024"))


def test_encode_requires_metadata_key() -> None:
    with pytest.raises(MalformedFilterError, match="'key' attribute is required"):
        encode(FilterNode(type=FilterType.metadata, operator="equals", value="x"))


def test_key_on_any_type_passes_through() -> None:
    wire = encode(FilterNode(type=FilterType.name, operator="equals", key="k", value="x"))
    assert wire == {"type": "name", "operator": "equals", "key": "k", "value": "x"}


def test_server_key_on_kind_leaf_reencodes() -> None:
    wire = {"type": "kind", "operator": "equals", "key": "x", "value": "Pod"}
    node = decode(wire)

    assert node.key == "x"
    assert encode(node) == wire
    assert decode(encode(node)) == node


def test_encode_rejects_leaf_with_conditions() -> None:
    leaf = FilterNode(type=FilterType.kind, operator="equals", value="Pod", conditions=[name_leaf()])
    with pytest.raises(MalformedFilterError, match="cannot have nested conditions"):
        encode(leaf)


# Decode failures


@pytest.mark.parametrize(
    "wire, message",
    [
        ({"operator": "equals"}, "missing or invalid filter type"),
        ({"type": ""}, "missing or invalid filter type"),
        ({"type": 7}, "missing or invalid filter type"),
        ({"type": "version"}, "unrecognized filter type"),
        ({"type": "kind", "value": 3}, "'value' must be a string"),
        ({"type": "kind", "not": "yes"}, "'not' must be a boolean"),
        ({"type": "comparison", "operator": "and", "conditions": "nope"}, "'conditions' must be a list"),
    ],
)
def test_decode_rejects_malformed_payloads(wire: dict, message: str) -> None:
    with pytest.raises(MalformedFilterError, match=message):
        decode(wire)


def test_decode_reports_index_of_invalid_child() -> None:
    wire = {
        "type": "comparison",
        "operator": "or",
        "conditions": [{"type": "kind", "operator": "equals", "value": "Pod"}, "kind"],
    }
    with pytest.raises(MalformedFilterError) as exc_info:
        decode(wire)
    assert exc_info.value.path == "filter.conditions[1]"
    assert "not a valid map" in str(exc_info.value)


def test_decode_reports_unknown_type_in_nested_child() -> None:
    wire = deep_tree_wire()
    wire["conditions"][1]["conditions"][1]["conditions"][0]["type"] = "bogus"
    with pytest.raises(MalformedFilterError) as exc_info:
        decode(wire)
    assert exc_info.value.path == "filter.conditions[1].conditions[1].conditions[0]"


def test_decode_ignores_conditions_on_leaf(caplog: pytest.LogCaptureFixture) -> None:
    wire = {
        "type": "kind",
        "operator": "equals",
        "value": "Pod",
        "conditions": [{"type": "name", "operator": "equals", "value": "x"}],
    }
    with caplog.at_level("WARNING", logger="ctrlplane_core"):
        node = decode(wire)
    assert node.conditions is None
    assert "Ignoring conditions" in caplog.text


# Depth


def test_wire_codec_handles_very_deep_trees() -> None:
    wire: dict = {"type": "kind", "operator": "equals", "value": "Pod"}
    for _ in range(1500):
        wire = {"type": "comparison", "operator": "and", "value": "", "conditions": [wire]}

    node = decode(wire)
    assert depth(node) == 1501
    assert encode(node)["conditions"][0]["type"] == "comparison"


def test_check_depth(deep_tree: FilterNode) -> None:
    assert depth(deep_tree) == 4
    check_depth(deep_tree, limit=4)
    with pytest.raises(MalformedFilterError, match="nested 4 levels deep"):
        check_depth(deep_tree, limit=3)


def test_metadata_leaf_stub_is_well_formed() -> None:
    assert encode(metadata_leaf())["key"] == "environment"


def test_check_depth_honours_explicit_zero_limit() -> None:
    with pytest.raises(MalformedFilterError, match="the maximum is 0"):
        check_depth(kind_leaf(), limit=0)
