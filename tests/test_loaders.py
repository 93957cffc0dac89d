"""Tests for snapshot file loading."""

from __future__ import annotations

import json
from datetime import timezone
from pathlib import Path

import pytest
import yaml

from leaderboard_scoring.core.exceptions import RecordValidationError, SnapshotError
from leaderboard_scoring.data.loaders import (
    build_snapshot,
    load_snapshot,
    read_snapshot_document,
)

SNAPSHOT_DOCUMENT = {
    "users": [
        {"id": "alice", "displayName": "Alice", "hasAffiliation": True},
        {"id": "bob"},
    ],
    "prompts": [
        {"id": "p1", "authorId": "alice", "createdAt": "2025-03-01T12:00:00Z", "generatorTags": ["math"]},
    ],
    "feedbacks": [
        {"id": "f1", "reviewerId": "bob", "targetPromptId": "p1", "opinion": "positive"},
    ],
    "scores": [
        {"id": "s1", "promptId": "p1", "modelId": "gpt-4o", "value": 0.25, "responseId": "r1"},
    ],
    "responses": [
        {
            "id": "r1",
            "promptId": "p1",
            "modelId": "gpt-4o",
            "startedAt": "2025-03-01T12:00:00",
            "finishedAt": "2025-03-01T12:00:04",
        },
    ],
}


@pytest.fixture()
def snapshots_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "Snapshots"
    directory.mkdir()
    return directory


def test_load_json_snapshot(snapshots_dir: Path):
    path = snapshots_dir / "weekly.json"
    path.write_text(json.dumps(SNAPSHOT_DOCUMENT), encoding="utf-8")

    snapshot = load_snapshot(path)

    assert [item.id for item in snapshot.users] == ["alice", "bob"]
    assert snapshot.users[0].has_affiliation
    assert snapshot.prompts[0].generator_tags == ("math",)
    assert snapshot.prompts[0].created_at.tzinfo == timezone.utc
    assert snapshot.scores[0].value == 0.25
    assert snapshot.responses[0].latency_seconds == 4.0
    assert snapshot.benchmarks == ()


def test_load_yaml_snapshot(snapshots_dir: Path):
    path = snapshots_dir / "weekly.yaml"
    path.write_text(yaml.safe_dump(SNAPSHOT_DOCUMENT), encoding="utf-8")

    snapshot = load_snapshot(path)

    assert snapshot.feedbacks[0].opinion == "positive"
    assert snapshot.feedbacks[0].target_response_id is None


def test_read_errors_raise_snapshot_error(snapshots_dir: Path):
    bad_json = snapshots_dir / "bad.json"
    bad_json.write_text("{not json", encoding="utf-8")
    bad_suffix = snapshots_dir / "data.csv"
    bad_suffix.write_text("id\n", encoding="utf-8")

    for path in (bad_json, bad_suffix, snapshots_dir / "missing.json"):
        with pytest.raises(SnapshotError):
            read_snapshot_document(path)


def test_invalid_records_raise(snapshots_dir: Path):
    path = snapshots_dir / "broken.json"
    path.write_text(json.dumps({"prompts": [{"id": "p1"}]}), encoding="utf-8")

    with pytest.raises(RecordValidationError):
        load_snapshot(path)


def test_empty_document_is_rejected():
    with pytest.raises(RecordValidationError):
        build_snapshot(None)


def test_build_snapshot_from_mapping():
    snapshot = build_snapshot({"benchmarks": [{"id": "b1", "ownerId": "alice", "contributorIds": ["bob"]}]})

    assert snapshot.benchmarks[0].contributor_ids == ("bob",)
    assert snapshot.users == ()
