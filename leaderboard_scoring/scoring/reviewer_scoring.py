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

# Reviewer leaderboard: ranks users by how well their opinions track the group.
#
# For every prompt a reviewer rated, the reviewer's opinion (+1 / -1) is paired
# with the signed consensus of the *other* raters of that prompt (mean opinion in
# [-1, 1]). The reviewer's score is the Pearson correlation of the two vectors.

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from config.scoring_config import REVIEWER_FALLBACK_LABEL, REVIEWER_LABEL_BANDS

from ..core.config import ReviewerCoefficients, build_config
from ..core.types import ReviewerLeaderboardEntry, Snapshot
from ..data.index import SnapshotIndex, as_index
from .consensus import opinion_value, signed_consensus

logger = logging.getLogger(__name__)


def calculate_pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson product-moment correlation coefficient.

        r = Σ((x_i - x̄)(y_i - ȳ)) / sqrt(Σ(x_i - x̄)² · Σ(y_i - ȳ)²)

    Args:
        x: First vector
        y: Second vector, same length as ``x``

    Returns:
        float: r in [-1, 1]. Fewer than two points, or a vector with zero
               variance, gives 0.0 (undefined correlation treated as neutral).

    Raises:
        ValueError: If the vectors differ in length
    """
    if len(x) != len(y):
        raise ValueError(f"Vectors must have equal length, got {len(x)} and {len(y)}")
    n = len(x)
    if n < 2:
        return 0.0
    # A constant vector would otherwise leave rounding residue in the deviations
    if min(x) == max(x) or min(y) == max(y):
        return 0.0

    mean_x = math.fsum(x) / n
    mean_y = math.fsum(y) / n
    dx = [value - mean_x for value in x]
    dy = [value - mean_y for value in y]

    numerator = math.fsum(a * b for a, b in zip(dx, dy))
    denominator = math.sqrt(math.fsum(a * a for a in dx) * math.fsum(b * b for b in dy))
    if denominator == 0:
        return 0.0

    # Rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, numerator / denominator))


def correlation_label(r: float) -> str:
    """Presentation band for a correlation; not part of the ranking."""
    for lower_bound, label in REVIEWER_LABEL_BANDS:
        if r >= lower_bound:
            return label
    return REVIEWER_FALLBACK_LABEL


def build_reviewer_vectors(
    index: SnapshotIndex,
    reviewer_id: str,
    min_consensus_reviewers: int = 1,
) -> Tuple[List[float], List[float]]:
    """
    Pair a reviewer's opinions with the consensus of the other raters.

    Prompts where fewer than ``min_consensus_reviewers`` other users left
    feedback have no usable consensus and are left out of both vectors.
    """
    opinions: List[float] = []
    consensus: List[float] = []
    for feedback in index.feedbacks_by_reviewer.get(reviewer_id, []):
        if feedback.target_response_id is not None:
            continue
        target_feedbacks = index.feedbacks_by_prompt.get(feedback.target_prompt_id, [])
        others = [item for item in target_feedbacks if item.reviewer_id != reviewer_id]
        if len(others) < min_consensus_reviewers:
            continue
        value = signed_consensus(others)
        if value is None:
            continue
        opinions.append(float(opinion_value(feedback.opinion)))
        consensus.append(value)
    return opinions, consensus


def calculate_reviewer_scores(
    data: Union[Snapshot, SnapshotIndex],
    coefficients: Optional[Union[ReviewerCoefficients, Mapping[str, Any]]] = None,
) -> List[ReviewerLeaderboardEntry]:
    """
    Calculate the reviewer leaderboard.

    Args:
        data: Input snapshot, or an index already built over it
        coefficients: Reviewer coefficients (defaults when None)

    Returns:
        List[ReviewerLeaderboardEntry]: Reviewers with at least
            ``min_reviews_required`` usable reviews, sorted by correlation
            descending, then review count descending, then user id
    """
    coefficients = build_config(ReviewerCoefficients, coefficients)
    index = as_index(data)

    entries: List[ReviewerLeaderboardEntry] = []
    for user in index.snapshot.users:
        opinions, consensus = build_reviewer_vectors(
            index, user.id, coefficients.min_consensus_reviewers
        )
        review_count = len(opinions)
        if review_count == 0 or review_count < coefficients.min_reviews_required:
            continue

        pearson = calculate_pearson_correlation(opinions, consensus)
        entries.append(ReviewerLeaderboardEntry(
            user_id=user.id,
            display_name=user.display_name or user.id,
            pearson_correlation=pearson,
            review_count=review_count,
            label=correlation_label(pearson),
        ))

    entries.sort(key=lambda entry: (-entry.pearson_correlation, -entry.review_count, entry.user_id))
    logger.info(
        f"Ranked {len(entries)} reviewer(s) with at least "
        f"{coefficients.min_reviews_required} usable review(s)"
    )
    return entries


__all__ = [
    "calculate_pearson_correlation",
    "correlation_label",
    "build_reviewer_vectors",
    "calculate_reviewer_scores",
]
