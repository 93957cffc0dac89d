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

# Contributor leaderboard: ranks users by the quality of the prompts they wrote.
#
#   quality(prompt)       = fraction of positive feedback, or 0 below min_reviews_for_quality
#   avg_prompt_quality    = mean quality over every authored prompt
#   reputation_multiplier = min(reputation_cap, 1 + historical reputation signal)
#   total_score           = affiliation bonus
#                           + quality_weight * avg_prompt_quality
#                           + reputation_weight * reputation_multiplier
#
# Users without prompts are not ranked at all.

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..core.config import ContributorCoefficients, build_config
from ..core.exceptions import ConfigurationError
from ..core.types import ContributorLeaderboardEntry, Feedback, Snapshot
from ..data.index import SnapshotIndex, as_index
from .consensus import positive_fraction

logger = logging.getLogger(__name__)


def calculate_prompt_quality(feedbacks: Sequence[Feedback], min_reviews: int) -> float:
    """
    Quality of a single prompt.

    Args:
        feedbacks: Feedback on the prompt, self-feedback already excluded
        min_reviews: Feedbacks required before the prompt is considered at all

    Returns:
        float: Fraction of positive feedback in [0, 1]; 0.0 when the prompt has
               fewer than ``min_reviews`` feedbacks, however positive they are
    """
    if len(feedbacks) < min_reviews:
        return 0.0
    fraction = positive_fraction(feedbacks)
    return fraction if fraction is not None else 0.0


def calculate_reputation_multiplier(signal: float, cap: float) -> float:
    """Monotonically increasing in ``signal``, starts at 1 and never exceeds ``cap``."""
    return min(cap, 1.0 + max(0.0, signal))


def _validate_reputation(reputation: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    if reputation is None:
        return {}
    if not isinstance(reputation, Mapping):
        raise ConfigurationError(
            f"Reputation signals must be a mapping, got {type(reputation).__name__}"
        )
    validated: Dict[str, float] = {}
    for user_id, signal in reputation.items():
        if isinstance(signal, bool) or not isinstance(signal, (int, float)) or not math.isfinite(signal):
            raise ConfigurationError(
                f"Reputation signal for user '{user_id}' must be a finite number, got {signal!r}"
            )
        validated[user_id] = float(signal)
    return validated


def calculate_contributor_scores(
    data: Union[Snapshot, SnapshotIndex],
    coefficients: Optional[Union[ContributorCoefficients, Mapping[str, Any]]] = None,
    reputation: Optional[Mapping[str, float]] = None,
) -> List[ContributorLeaderboardEntry]:
    """
    Calculate the contributor leaderboard.

    Args:
        data: Input snapshot, or an index already built over it
        coefficients: Contributor coefficients (defaults when None)
        reputation: Optional user id -> historical reputation signal; missing users get 0

    Returns:
        List[ContributorLeaderboardEntry]: Sorted by total score descending, then
            prompt count descending, then user id ascending

    Raises:
        ConfigurationError: If the coefficients or reputation signals are malformed
    """
    coefficients = build_config(ContributorCoefficients, coefficients)
    signals = _validate_reputation(reputation)
    index = as_index(data)

    entries: List[ContributorLeaderboardEntry] = []
    for user in index.snapshot.users:
        prompts = index.prompts_by_author.get(user.id, [])
        if not prompts:
            continue

        qualities = [
            calculate_prompt_quality(
                index.feedbacks_by_prompt.get(prompt.id, []),
                coefficients.min_reviews_for_quality,
            )
            for prompt in prompts
        ]
        quality_score = math.fsum(qualities)
        avg_prompt_quality = quality_score / len(prompts)

        affiliation_bonus = coefficients.affiliation_bonus_points if user.has_affiliation else 0.0
        multiplier = calculate_reputation_multiplier(
            signals.get(user.id, 0.0), coefficients.reputation_cap
        )
        total_score = (
            affiliation_bonus
            + coefficients.quality_weight * avg_prompt_quality
            + coefficients.reputation_weight * multiplier
        )

        entries.append(ContributorLeaderboardEntry(
            user_id=user.id,
            display_name=user.display_name or user.id,
            total_score=total_score,
            quality_score=quality_score,
            affiliation_bonus=float(affiliation_bonus),
            prompt_count=len(prompts),
            avg_prompt_quality=avg_prompt_quality,
            reputation_multiplier=multiplier,
        ))

    entries.sort(key=lambda entry: (-entry.total_score, -entry.prompt_count, entry.user_id))
    logger.info(
        f"Ranked {len(entries)} contributor(s), "
        f"skipped {len(index.snapshot.users) - len(entries)} user(s) without prompts"
    )
    return entries


__all__ = [
    "calculate_prompt_quality",
    "calculate_reputation_multiplier",
    "calculate_contributor_scores",
]
