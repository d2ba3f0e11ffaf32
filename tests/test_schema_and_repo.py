from __future__ import annotations

import json
from pathlib import Path

from issue_radar.repositories.issue_repo import (
    IssueRepository,
    IssueSnapshot,
    PayloadShape,
    canonicalize_payload,
    detect_payload_shape,
    scope_to_project,
)
from issue_radar.schema import Issue, coerce_issue


def test_issue_collapses_missing_variants() -> None:
    issue = Issue.model_validate(
        {
            "id": 3,
            "title": "Crash",
            "assignee": "   ",
            "labels": None,
            "description": None,
            "milestone": None,
            "extra": "ignored",
        }
    )
    assert issue.assignee == ""
    assert not issue.has_assignee
    assert issue.labels == []
    assert issue.description == ""
    assert issue.milestone_title == ""
    assert issue.id_text == "3"


def test_issue_keeps_assignee_text_and_drops_non_string_values() -> None:
    issue = Issue.model_validate(
        {"id": "12", "title": "x", "assignee": "alice", "labels": ["bug", 7, None, "ui"]}
    )
    assert issue.id == 12
    assert issue.assignee == "alice"
    assert issue.labels == ["bug", "ui"]

    odd = Issue.model_validate({"id": "abc", "title": None, "assignee": {"name": "bob"}})
    assert odd.id is None
    assert odd.id_text == ""
    assert odd.title == ""
    assert odd.assignee == ""


def test_milestone_structured_form_takes_precedence() -> None:
    both = Issue.model_validate(
        {"id": 1, "title": "a", "milestone": {"title": "v2"}, "milestone_title": "v1"}
    )
    assert both.milestone_title == "v2"

    flat = Issue.model_validate({"id": 2, "title": "b", "milestone_title": "v1"})
    assert flat.milestone_title == "v1"

    empty_struct = Issue.model_validate(
        {"id": 3, "title": "c", "milestone": {"title": ""}, "milestone_title": "v1"}
    )
    assert empty_struct.milestone_title == "v1"


def test_coerce_issue_rejects_non_mappings() -> None:
    assert coerce_issue("not an issue") is None
    assert coerce_issue(None) is None
    assert coerce_issue(42) is None
    assert coerce_issue({"id": 1, "title": "ok"}) is not None


def test_canonicalize_payload_shapes() -> None:
    rows = [{"id": 1, "title": "a"}]
    assert canonicalize_payload(rows) == rows
    assert canonicalize_payload({"issues": rows}) == rows
    assert canonicalize_payload({"data": rows}) == rows
    assert canonicalize_payload({"issues": rows, "data": []}) == rows
    assert canonicalize_payload({"issues": "nope", "data": rows}) == rows
    assert canonicalize_payload({"items": rows}) == []
    assert canonicalize_payload(None) == []
    assert canonicalize_payload("issues") == []


def test_detect_payload_shape_tells_empty_from_unrecognized() -> None:
    assert detect_payload_shape([]) is PayloadShape.ARRAY
    assert detect_payload_shape({"issues": []}) is PayloadShape.ISSUES_ENVELOPE
    assert detect_payload_shape({"data": []}) is PayloadShape.DATA_ENVELOPE
    assert detect_payload_shape({"results": []}) is PayloadShape.UNRECOGNIZED
    assert detect_payload_shape(17) is PayloadShape.UNRECOGNIZED


def test_repository_load_replaces_snapshot_wholesale() -> None:
    repo = IssueRepository()
    assert len(repo.snapshot) == 0

    first = repo.load({"issues": [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]})
    assert [r["id"] for r in first.records] == [1, 2]
    assert first.recognized

    second = repo.load({"unexpected": True})
    assert repo.snapshot is second
    assert second.records == ()
    assert not second.recognized
    assert second.shape is PayloadShape.UNRECOGNIZED

    empty = repo.load([])
    assert empty.records == ()
    assert empty.recognized


def test_snapshot_signature_tracks_content() -> None:
    a = IssueSnapshot.build([{"id": 1, "title": "a"}])
    b = IssueSnapshot.build([{"title": "a", "id": 1}])
    c = IssueSnapshot.build([{"id": 1, "title": "changed"}])
    assert a.signature == b.signature
    assert a.signature != c.signature
    assert len(a.issues) == len(a.records) == 1


def test_scope_to_project_uses_nested_or_flat_project_id() -> None:
    rows = [
        {"id": 1, "title": "a", "project": {"id": 5}},
        {"id": 2, "title": "b", "project_id": 5},
        {"id": 3, "title": "c", "project_id": 6},
        "garbage",
    ]
    assert [r["id"] for r in scope_to_project(rows, 5)] == [1, 2]
    assert scope_to_project(rows, None) == rows

    repo = IssueRepository()
    snap = repo.load({"data": rows}, project_id=6)
    assert [r["id"] for r in snap.records] == [3]


def test_repository_load_json_file(tmp_path: Path) -> None:
    repo = IssueRepository()
    path = tmp_path / "payload.json"

    assert repo.load_json_file(path).records == ()

    path.write_text(json.dumps({"issues": [{"id": 9, "title": "z"}]}), encoding="utf-8")
    assert [r["id"] for r in repo.load_json_file(path).records] == [9]

    path.write_text("{not json", encoding="utf-8")
    snap = repo.load_json_file(path)
    assert snap.records == ()
    assert not snap.recognized


def test_malformed_numeric_ids_collapse_to_none() -> None:
    snap = IssueRepository().load([{"id": "--5", "title": "x"}, {"id": 1, "title": "ok"}])
    assert len(snap.records) == 2
    assert snap.issues[0].id is None
    assert snap.issues[1].id == 1
    assert Issue.model_validate({"id": "²"}).id is None
    assert Issue.model_validate({"project_id": "1_0x"}).project_id is None


def test_integral_float_ids_are_kept() -> None:
    issue = Issue.model_validate({"id": 7.0, "project": {"id": 3.0}})
    assert issue.id == 7
    assert issue.id_text == "7"
    assert issue.project_id == 3
    assert Issue.model_validate({"id": 7.5}).id is None
