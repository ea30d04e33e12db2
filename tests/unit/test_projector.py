"""
Unit tests — field projector: nested reconstruction from dotted paths.
"""
from src.gaql.projector import project, project_record

_RECORD = {
    "campaign": {"id": "42", "name": "Spring Sale", "status": "ENABLED", "target_spend": {"target_spend_micros": 10}},
    "metrics": {"clicks": 7, "impressions": 300},
    "a": {"b": {"c": "deep", "sibling": "hidden"}, "other": 1},
}


def test_projects_nested_shape():
    out = project_record(_RECORD, ["campaign.id", "metrics.clicks"])
    assert out == {"campaign": {"id": "42"}, "metrics": {"clicks": 7}}


def test_deep_path_without_sibling_leak():
    out = project_record(_RECORD, ["a.b.c"])
    assert out["a"]["b"]["c"] == _RECORD["a"]["b"]["c"]
    assert out == {"a": {"b": {"c": "deep"}}}


def test_missing_path_omitted():
    out = project_record(_RECORD, ["campaign.id", "campaign.nope", "segments.date"])
    assert out == {"campaign": {"id": "42"}}


def test_missing_intermediate_leaves_no_empty_object():
    out = project_record(_RECORD, ["campaign.name.first"])
    assert out == {}


def test_field_order_does_not_change_structure():
    a = project_record(_RECORD, ["metrics.clicks", "campaign.id", "campaign.status"])
    b = project_record(_RECORD, ["campaign.status", "campaign.id", "metrics.clicks"])
    assert a == b


def test_duplicate_fields_are_harmless():
    out = project_record(_RECORD, ["campaign.id", "campaign.id"])
    assert out == {"campaign": {"id": "42"}}


def test_selecting_a_mapping_copies_it():
    out = project_record(_RECORD, ["campaign.target_spend"])
    assert out == {"campaign": {"target_spend": {"target_spend_micros": 10}}}
    out["campaign"]["target_spend"]["target_spend_micros"] = 0
    assert _RECORD["campaign"]["target_spend"]["target_spend_micros"] == 10


def test_parent_and_child_paths_together():
    out = project_record(_RECORD, ["a.b", "a.b.c"])
    assert out == {"a": {"b": {"c": "deep", "sibling": "hidden"}}}


def test_project_one_output_per_record():
    records = [_RECORD, {"campaign": {"id": "7"}}, {}]
    out = project(records, ["campaign.id", "metrics.clicks"])
    assert out == [
        {"campaign": {"id": "42"}, "metrics": {"clicks": 7}},
        {"campaign": {"id": "7"}},
        {},
    ]


def test_source_not_mutated():
    out = project([_RECORD], ["campaign.id"])[0]
    out["campaign"]["id"] = "changed"
    assert _RECORD["campaign"]["id"] == "42"
