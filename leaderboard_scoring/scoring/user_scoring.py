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

# User reputation score: one-time bonuses plus continuously growing activity metrics.
#
# One-time bonuses (all or nothing):
# - Affiliation
# - Benchmark creator (owns a prompt set with enough distinct contributors)
# - Diverse feedback across prompt sets / across prompt authors
# - Quality prompts (enough prompts with enough positive feedback)
# - Difficult prompts (enough prompts whose mean model score is below the threshold)
# - SOTA difficult prompts (same, counting only scores from SOTA models)
#
# Continuous components:
# - h-index over positive-feedback counts, worth coefficient * h^2
# - Quality prompt count, feedback given, distinct collaborators

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Set, Union

from ..core.config import UserScoreConfig, build_config
from ..core.types import (
    BonusComponents,
    ContinuousComponents,
    Prompt,
    Score,
    Snapshot,
    User,
    UserScoreComponents,
    UserScoreEntry,
)
from ..data.index import SnapshotIndex, as_index

logger = logging.getLogger(__name__)


def calculate_h_index(quality_counts: Iterable[int]) -> int:
    """
    Largest h such that at least h prompts each have at least h quality points.

    Args:
        quality_counts: Quality points (positive feedback count) of each prompt

    Returns:
        int: The h-index, 0 for no prompts
    """
    ordered = sorted(quality_counts, reverse=True)
    h = 0
    for position, count in enumerate(ordered, 1):
        if count >= position:
            h = position
        else:
            break
    return h


def count_positive_feedbacks(index: SnapshotIndex, prompt: Prompt) -> int:
    return sum(1 for feedback in index.feedbacks_by_prompt.get(prompt.id, []) if feedback.is_positive)


def is_sota_model(model_id: str, sota_models: Sequence[str]) -> bool:
    """Case-insensitive substring match, so 'openai/gpt-4o-2024-08-06' counts as 'gpt-4o'."""
    lowered = model_id.lower()
    return any(sota.lower() in lowered for sota in sota_models)


def mean_score(scores: Sequence[Score]) -> Optional[float]:
    if not scores:
        return None
    return math.fsum(score.value for score in scores) / len(scores)


def is_difficult_prompt(scores: Sequence[Score], threshold: float) -> bool:
    """A prompt stumps the models when their mean score on it is below ``threshold``."""
    average = mean_score(scores)
    return average is not None and average < threshold


def count_collaborators(index: SnapshotIndex, user_id: str) -> int:
    """Distinct contributors of prompt sets the user owns or holds a role on, excluding the user."""
    benchmark_ids: Set[str] = {benchmark.id for benchmark in index.benchmarks_by_owner.get(user_id, [])}
    benchmark_ids.update(
        collaboration.prompt_set_id
        for collaboration in index.collaborations_by_user.get(user_id, [])
    )

    collaborators: Set[str] = set()
    for benchmark_id in benchmark_ids:
        collaborators.update(index.contributors_by_benchmark.get(benchmark_id, set()))
    collaborators.discard(user_id)
    return len(collaborators)


def calculate_user_score_components(
    index: SnapshotIndex,
    user: User,
    config: UserScoreConfig,
) -> UserScoreComponents:
    """Calculate the full bonus / continuous breakdown for a single user."""
    prompts = index.prompts_by_author.get(user.id, [])
    feedbacks = index.feedbacks_by_reviewer.get(user.id, [])
    owned_benchmarks = index.benchmarks_by_owner.get(user.id, [])

    positive_counts = {prompt.id: count_positive_feedbacks(index, prompt) for prompt in prompts}
    quality_prompts = [
        prompt for prompt in prompts
        if positive_counts[prompt.id] >= config.min_positive_feedbacks
    ]

    # One-time bonuses
    bonuses = BonusComponents()

    bonuses.has_affiliation = user.has_affiliation
    bonuses.affiliation_points = config.affiliation_bonus if bonuses.has_affiliation else 0.0

    bonuses.has_benchmark_creator = any(
        len(index.contributors_by_benchmark.get(benchmark.id, set())) >= config.min_benchmark_contributors
        for benchmark in owned_benchmarks
    )
    bonuses.benchmark_creator_points = config.benchmark_creator_bonus if bonuses.has_benchmark_creator else 0.0

    reviewed_prompts = [index.prompts_by_id[feedback.target_prompt_id] for feedback in feedbacks]
    reviewed_sets = {prompt.prompt_set_id for prompt in reviewed_prompts if prompt.prompt_set_id is not None}
    reviewed_authors = {prompt.author_id for prompt in reviewed_prompts} - {user.id}

    bonuses.has_diverse_feedback_benchmarks = len(reviewed_sets) >= config.min_feedback_benchmarks
    bonuses.diverse_feedback_benchmarks_points = (
        config.diverse_feedback_benchmarks_bonus if bonuses.has_diverse_feedback_benchmarks else 0.0
    )
    bonuses.has_diverse_feedback_users = len(reviewed_authors) >= config.min_feedback_users
    bonuses.diverse_feedback_users_points = (
        config.diverse_feedback_users_bonus if bonuses.has_diverse_feedback_users else 0.0
    )

    bonuses.has_quality_prompts = len(quality_prompts) >= config.min_quality_prompts
    bonuses.quality_prompts_points = config.quality_prompts_bonus if bonuses.has_quality_prompts else 0.0

    difficult_count = 0
    sota_difficult_count = 0
    for prompt in prompts:
        scores = index.scores_by_prompt.get(prompt.id, [])
        if is_difficult_prompt(scores, config.wrong_answer_threshold):
            difficult_count += 1
        sota_scores = [score for score in scores if is_sota_model(score.model_id, config.sota_models)]
        if is_difficult_prompt(sota_scores, config.wrong_answer_threshold):
            sota_difficult_count += 1

    bonuses.has_difficult_prompts = difficult_count >= config.min_difficult_prompts
    bonuses.difficult_prompts_points = config.difficult_prompts_bonus if bonuses.has_difficult_prompts else 0.0
    bonuses.has_sota_difficult_prompts = sota_difficult_count >= config.min_difficult_prompts
    bonuses.sota_difficult_prompts_points = (
        config.sota_difficult_prompts_bonus if bonuses.has_sota_difficult_prompts else 0.0
    )

    # Continuous components
    continuous = ContinuousComponents()
    continuous.h_index = calculate_h_index(positive_counts.values())
    continuous.h_index_points = config.h_index_coefficient * continuous.h_index ** 2
    continuous.quality_prompts_count = len(quality_prompts)
    continuous.quality_prompts_points = continuous.quality_prompts_count * config.quality_prompts_coefficient
    continuous.feedback_count = len(feedbacks)
    continuous.feedback_activity_points = continuous.feedback_count * config.feedback_activity_coefficient
    continuous.collaborator_count = count_collaborators(index, user.id)
    continuous.collaboration_points = continuous.collaborator_count * config.collaboration_coefficient

    total_bonuses = bonuses.total
    total_continuous = continuous.total
    return UserScoreComponents(
        bonuses=bonuses,
        continuous=continuous,
        total_bonuses=total_bonuses,
        total_continuous=total_continuous,
        total_score=total_bonuses + total_continuous,
    )


def calculate_user_scores(
    data: Union[Snapshot, SnapshotIndex],
    config: Optional[Union[UserScoreConfig, Mapping[str, Any]]] = None,
) -> List[UserScoreEntry]:
    """
    Calculate the user reputation score of every user.

    Args:
        data: Input snapshot, or an index already built over it
        config: User score configuration (defaults when None)

    Returns:
        List[UserScoreEntry]: Every user, sorted by total score descending then user id
    """
    config = build_config(UserScoreConfig, config)
    index = as_index(data)

    entries: List[UserScoreEntry] = []
    for user in index.snapshot.users:
        components = calculate_user_score_components(index, user, config)
        entries.append(UserScoreEntry(
            user_id=user.id,
            display_name=user.display_name or user.id,
            total_score=components.total_score,
            components=components,
            prompts_created=len(index.prompts_by_author.get(user.id, [])),
            feedbacks_given=len(index.feedbacks_by_reviewer.get(user.id, [])),
            benchmarks_owned=len(index.benchmarks_by_owner.get(user.id, [])),
        ))

    entries.sort(key=lambda entry: (-entry.total_score, entry.user_id))
    logger.info(f"Calculated reputation scores for {len(entries)} user(s)")
    return entries


__all__ = [
    "calculate_h_index",
    "count_positive_feedbacks",
    "is_sota_model",
    "is_difficult_prompt",
    "count_collaborators",
    "calculate_user_score_components",
    "calculate_user_scores",
]
