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

# Consensus statistics over the feedback left on a single target (a prompt, or a
# model-response pair). Two views of the same data are provided:
# - agreement: fraction of the *other* raters who share a given rater's opinion
# - signed consensus: mean opinion of the other raters, mapped to [-1, 1]
# Both always exclude the rater whose opinion is being compared.

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.constants import OPINION_VALUES
from ..core.types import Feedback


def opinion_value(opinion: str) -> int:
    """Map an opinion label to +1 (positive) or -1 (negative)."""
    try:
        return OPINION_VALUES[opinion]
    except KeyError:
        raise ValueError(f"Unknown opinion '{opinion}'") from None


def _others(feedbacks: Iterable[Feedback], rater_id: Optional[str]) -> List[Feedback]:
    return [feedback for feedback in feedbacks if feedback.reviewer_id != rater_id]


def consensus_value(feedback: Feedback, target_feedbacks: Sequence[Feedback]) -> Optional[float]:
    """
    Fraction of other raters of the same target whose opinion matches ``feedback``.

    Args:
        feedback: The rater's own feedback
        target_feedbacks: Every feedback on the same target; may include ``feedback``

    Returns:
        Optional[float]: Agreement in [0, 1], 0.0 when every other rater disagrees,
                         None when nobody else rated the target
    """
    others = [
        other for other in _others(target_feedbacks, feedback.reviewer_id)
        if other.target == feedback.target
    ]
    if not others:
        return None
    matching = sum(1 for other in others if other.opinion == feedback.opinion)
    return matching / len(others)


def positive_fraction(feedbacks: Sequence[Feedback], exclude_rater: Optional[str] = None) -> Optional[float]:
    """Fraction of positive opinions, optionally excluding one rater. None when empty."""
    pool = _others(feedbacks, exclude_rater) if exclude_rater is not None else list(feedbacks)
    if not pool:
        return None
    return sum(1 for feedback in pool if feedback.is_positive) / len(pool)


def signed_consensus(feedbacks: Sequence[Feedback], exclude_rater: Optional[str] = None) -> Optional[float]:
    """
    Mean opinion of the pool mapped to [-1, 1] (all positive = 1, all negative = -1).

    Equivalent to ``2 * positive_fraction - 1``; used as the regression target of the
    reviewer correlation.
    """
    pool = _others(feedbacks, exclude_rater) if exclude_rater is not None else list(feedbacks)
    if not pool:
        return None
    return math.fsum(opinion_value(feedback.opinion) for feedback in pool) / len(pool)


def calculate_consensus_values(feedbacks: Iterable[Feedback]) -> Dict[str, Optional[float]]:
    """
    Compute the agreement value of every feedback against the others on its target.

    Feedbacks are grouped by target, so prompt feedback and feedback on a
    model-response pair of the same prompt never mix.

    Returns:
        Dict[str, Optional[float]]: Feedback id -> agreement (None without other raters)
    """
    by_target: Dict[tuple, List[Feedback]] = defaultdict(list)
    for feedback in feedbacks:
        by_target[feedback.target].append(feedback)

    values: Dict[str, Optional[float]] = {}
    for group in by_target.values():
        for feedback in group:
            values[feedback.id] = consensus_value(feedback, group)
    return values


__all__ = [
    "opinion_value",
    "consensus_value",
    "positive_fraction",
    "signed_consensus",
    "calculate_consensus_values",
]
