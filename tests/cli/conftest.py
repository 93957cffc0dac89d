"""Shared fixtures for CLI tests."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

SNAPSHOT_DOCUMENT = {
    "users": [
        {"id": "author", "displayName": "Ada", "hasAffiliation": True},
        {"id": "r1"},
        {"id": "r2"},
        {"id": "r3"},
    ],
    "prompts": [
        {"id": "p1", "authorId": "author", "createdAt": "2025-05-01T00:00:00Z", "tags": ["math"]},
        {"id": "p2", "authorId": "author", "createdAt": "2025-05-20T00:00:00Z", "tags": ["law"]},
    ],
    "feedbacks": [
        {"id": "f1", "reviewerId": "r1", "targetPromptId": "p1", "opinion": "positive"},
        {"id": "f2", "reviewerId": "r2", "targetPromptId": "p1", "opinion": "positive"},
        {"id": "f3", "reviewerId": "r3", "targetPromptId": "p1", "opinion": "negative"},
        {"id": "f4", "reviewerId": "r1", "targetPromptId": "p2", "opinion": "positive"},
    ],
    "scores": [
        {"id": "s1", "promptId": "p1", "modelId": "model-a", "value": 0.4},
        {"id": "s2", "promptId": "p2", "modelId": "model-a", "value": 0.8},
        {"id": "s3", "promptId": "p1", "modelId": "model-b", "value": 0.9},
        {"id": "s4", "promptId": "p9", "modelId": "model-b", "value": 0.1},
    ],
}


@pytest.fixture(scope="session")
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT_DOCUMENT), encoding="utf-8")
    return path
