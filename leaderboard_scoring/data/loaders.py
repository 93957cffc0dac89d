# ------------------------------------------------------------------------------------------------
# License
# ------------------------------------------------------------------------------------------------

# Copyright (c) 2025 LSeu-Open
#
# This code is licensed under the MIT License.
# See LICENSE file in the root directory

# ------------------------------------------------------------------------------------------------
# Description
# ------------------------------------------------------------------------------------------------

"""
Data loading utilities for snapshots.

This module provides functions for loading a snapshot of users, prompts,
feedback, scores, responses, prompt sets and collaborations from a JSON or
YAML file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from ..core.exceptions import SnapshotError
from ..core.types import (
    Benchmark,
    Collaboration,
    Feedback,
    Prompt,
    Response,
    Score,
    Snapshot,
    User,
)
from .validators import validate_snapshot_data

logger = logging.getLogger(__name__)

RECORD_TYPES = {
    'users': User,
    'prompts': Prompt,
    'feedbacks': Feedback,
    'scores': Score,
    'responses': Response,
    'benchmarks': Benchmark,
    'collaborations': Collaboration,
}

SNAPSHOT_SUFFIXES = (".json", ".yaml", ".yml")


def read_snapshot_document(path: Union[str, Path]) -> Any:
    """Read and decode a snapshot file.

    Args:
        path (Union[str, Path]): Path to a .json, .yaml or .yml file

    Returns:
        Any: The decoded document

    Raises:
        SnapshotError: If the file is missing, has an unsupported extension or
            cannot be decoded
    """
    file_path = Path(path)
    if not file_path.exists():
        raise SnapshotError(f"Snapshot file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in SNAPSHOT_SUFFIXES:
        raise SnapshotError(f"Snapshot file must be .json, .yaml or .yml: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Error reading snapshot file '{file_path}': {exc}") from exc

    try:
        if suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SnapshotError(f"Invalid snapshot format in '{file_path}': {exc}") from exc


def build_snapshot(data: Mapping[str, Any], source: Optional[str] = None) -> Snapshot:
    """Validate a decoded snapshot document and build the immutable ``Snapshot``.

    Raises:
        RecordValidationError: If any record fails validation
    """
    validated = validate_snapshot_data(data, source)
    return Snapshot(**{
        section: tuple(RECORD_TYPES[section](**record) for record in records)
        for section, records in validated.items()
    })


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load, validate and build a snapshot from a JSON or YAML file.

    Args:
        path (Union[str, Path]): Path to the snapshot file

    Returns:
        Snapshot: The loaded snapshot

    Raises:
        SnapshotError: If the file cannot be read or decoded
        RecordValidationError: If any record fails validation
    """
    data = read_snapshot_document(path)
    snapshot = build_snapshot(data, str(path))
    logger.info(
        f"Loaded snapshot '{path}': {len(snapshot.users)} users, {len(snapshot.prompts)} prompts, "
        f"{len(snapshot.feedbacks)} feedbacks, {len(snapshot.scores)} scores"
    )
    return snapshot


__all__ = [
    "RECORD_TYPES",
    "read_snapshot_document",
    "build_snapshot",
    "load_snapshot",
]
