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
Main module for the leaderboard scoring system.

This module runs complete computations over one snapshot: the contributor and
reviewer leaderboards with their input statistics, the user reputation scores
with their statistics, and the curated model leaderboard. The snapshot index is
built once per call and its data integrity warnings are returned alongside the
results.
"""

import json
import logging
import time
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from .core.config import (
    LeaderboardCoefficients,
    UserScoreConfig,
    build_config,
)
from .core.constants import RESULTS_DIR
from .core.exceptions import DataIntegrityWarning
from .core.types import LeaderboardResults, Snapshot, UserScoreResults
from .data.index import SnapshotIndex, as_index
from .scoring.contributor_scoring import calculate_contributor_scores
from .scoring.curated_leaderboard import calculate_curated_leaderboard
from .scoring.reviewer_scoring import calculate_reviewer_scores
from .scoring.stats import calculate_leaderboard_stats, calculate_user_score_stats
from .scoring.user_scoring import calculate_user_scores

logger = logging.getLogger(__name__)


def calculate_leaderboards(
    data: Union[Snapshot, SnapshotIndex],
    coefficients: Optional[Union[LeaderboardCoefficients, Mapping[str, Any]]] = None,
    reputation: Optional[Mapping[str, float]] = None,
) -> LeaderboardResults:
    """
    Calculate the contributor and reviewer leaderboards of a snapshot.

    Args:
        data: Input snapshot, or an index already built over it
        coefficients: Both coefficient sets (defaults when None)
        reputation: Optional user id -> historical reputation signal

    Returns:
        LeaderboardResults: Both leaderboards, input statistics and warnings

    Raises:
        ConfigurationError: If the coefficients are malformed
    """
    start_time = time.time()
    coefficients = build_config(LeaderboardCoefficients, coefficients)
    index = as_index(data)

    contributors = calculate_contributor_scores(index, coefficients.contributor, reputation)
    reviewers = calculate_reviewer_scores(index, coefficients.reviewer)

    results = LeaderboardResults(
        contributor_leaderboard=contributors,
        reviewer_leaderboard=reviewers,
        stats=calculate_leaderboard_stats(index),
        coefficients=coefficients,
        calculated_at=datetime.now(timezone.utc),
        warnings=list(index.warnings),
    )

    if results.insufficient_data:
        logger.info("Not enough data to rank any contributor or reviewer")
    logger.info(f"Leaderboards calculated in {time.time() - start_time:.2f} seconds")
    return results


def calculate_user_score_results(
    data: Union[Snapshot, SnapshotIndex],
    config: Optional[Union[UserScoreConfig, Mapping[str, Any]]] = None,
) -> UserScoreResults:
    """
    Calculate the reputation score of every user together with score statistics.

    Raises:
        ConfigurationError: If the user score configuration is malformed
    """
    start_time = time.time()
    config = build_config(UserScoreConfig, config)
    index = as_index(data)

    scores = calculate_user_scores(index, config)
    results = UserScoreResults(
        scores=scores,
        stats=calculate_user_score_stats(scores, index),
        config=config,
        calculated_at=datetime.now(timezone.utc),
        warnings=list(index.warnings),
    )

    logger.info(f"User scores calculated in {time.time() - start_time:.2f} seconds")
    return results


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, DataIntegrityWarning):
        return value.as_dict()
    if is_dataclass(value) and not isinstance(value, type):
        payload = {item.name: _to_jsonable(getattr(value, item.name)) for item in fields(value)}
        if hasattr(value, "insufficient_data"):
            payload["insufficient_data"] = value.insufficient_data
        return payload
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def export_results_as_json(results: Any) -> str:
    """Serialise any result object (dataclasses, datetimes, pydantic models) to indented JSON."""
    return json.dumps(_to_jsonable(results), indent=4)


def save_results(results: Any, name: str, results_directory: Union[str, Path] = RESULTS_DIR) -> Path:
    """Write a result object as JSON to ``results_directory/<name>_results.json``."""
    directory = Path(results_directory)
    directory.mkdir(parents=True, exist_ok=True)
    output_file = directory / f"{name}_results.json"
    output_file.write_text(export_results_as_json(results), encoding="utf-8")
    logger.info(f"[+] Results successfully saved to: {output_file}")
    return output_file


__all__ = [
    "calculate_leaderboards",
    "calculate_user_score_results",
    "calculate_curated_leaderboard",
    "export_results_as_json",
    "save_results",
]
