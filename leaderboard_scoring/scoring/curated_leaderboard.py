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

# Curated model leaderboard: ranks AI models over a filtered subset of prompts.
#
# Pipeline, in order:
# 1. Filter    - per-prompt predicates (tags, type, set, uploader, age, first
#                response gap, model slugs), then inclusive count / average
#                ranges evaluated on per-prompt aggregates
# 2. Stats     - distinct prompts, responses and scores of the filtered set
# 3. Weight    - optional prompt-age and response-delay decay, multiplied
# 4. Aggregate - weighted average, count, unique prompts and latency per model
# 5. Coverage  - drop models scored on too small a share of the prompts
# 6. Rank      - average descending, then score count descending, then model id

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..core.config import CuratedFilter, WeightingParameters, build_config
from ..core.constants import (
    SECONDS_PER_DAY,
    WEIGHTING_EXPONENTIAL,
    WEIGHTING_LINEAR,
    WEIGHTING_NONE,
)
from ..core.types import (
    CuratedLeaderboardResult,
    CuratedStats,
    ModelLeaderboardEntry,
    Prompt,
    PromptSetDistribution,
    Score,
    Snapshot,
)
from ..data.index import SnapshotIndex, as_index

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------------------------
# Decay functions
# ------------------------------------------------------------------------------------------------

def linear_decay(value: float, maximum: float) -> float:
    """1 at 0, falling in a straight line to 0 at ``maximum`` and staying there."""
    return max(0.0, 1.0 - value / maximum)


def exponential_decay(value: float, half_life: float) -> float:
    """exp(-λ·value) with λ = ln 2 / half_life, so the weight halves every ``half_life``."""
    return math.exp(-math.log(2) / half_life * value)


def decay_weight(mode: str, value: Optional[float], maximum: float, half_life: float) -> float:
    """
    Weight of a single score for one decay dimension.

    Args:
        mode: 'none', 'linear' or 'exponential'
        value: Age in days or latency in seconds; None when unknown
        maximum: Zero point of the linear decay
        half_life: Half-life of the exponential decay

    Returns:
        float: Weight in [0, 1]; 1.0 when the mode is 'none' or the value is unknown
    """
    if mode == WEIGHTING_NONE or value is None:
        return 1.0
    value = max(0.0, value)
    if mode == WEIGHTING_LINEAR:
        return linear_decay(value, maximum)
    if mode == WEIGHTING_EXPONENTIAL:
        return exponential_decay(value, half_life)
    raise ValueError(f"Unknown weighting mode '{mode}'")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def prompt_age_days(prompt: Prompt, as_of: datetime) -> Optional[float]:
    if prompt.created_at is None:
        return None
    return (as_of - _as_utc(prompt.created_at)).total_seconds() / SECONDS_PER_DAY


# ------------------------------------------------------------------------------------------------
# Filter phase
# ------------------------------------------------------------------------------------------------

def _first_response_gap(index: SnapshotIndex, prompt: Prompt) -> Optional[float]:
    if prompt.created_at is None:
        return None
    starts = [
        _as_utc(response.started_at)
        for response in index.responses_by_prompt.get(prompt.id, [])
        if response.started_at is not None
    ]
    if not starts:
        return None
    return (min(starts) - _as_utc(prompt.created_at)).total_seconds()


def matches_prompt_filters(
    index: SnapshotIndex,
    prompt: Prompt,
    filters: CuratedFilter,
    as_of: datetime,
) -> bool:
    """Per-prompt predicates, evaluated before any aggregation."""
    if filters.tags and not prompt.all_tags().intersection(filters.tags):
        return False
    if filters.prompt_types and prompt.type not in filters.prompt_types:
        return False
    if filters.prompt_set_ids and prompt.prompt_set_id not in filters.prompt_set_ids:
        return False
    if filters.uploader_id is not None and prompt.author_id != filters.uploader_id:
        return False

    if filters.max_prompt_age_days is not None:
        age = prompt_age_days(prompt, as_of)
        if age is None or age > filters.max_prompt_age_days:
            return False

    if filters.max_gap_to_first_response is not None:
        gap = _first_response_gap(index, prompt)
        if gap is None or gap > filters.max_gap_to_first_response:
            return False

    if filters.model_slugs:
        scored_models = {score.model_id for score in index.scores_by_prompt.get(prompt.id, [])}
        if not scored_models.issuperset(filters.model_slugs):
            return False

    return True


def _in_range(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches_aggregate_filters(index: SnapshotIndex, prompt: Prompt, filters: CuratedFilter) -> bool:
    """Inclusive ranges over per-prompt aggregates (the HAVING part of the filter)."""
    scores = index.scores_by_prompt.get(prompt.id, [])
    feedbacks = index.feedbacks_by_prompt.get(prompt.id, [])
    positive = sum(1 for feedback in feedbacks if feedback.is_positive)
    avg_score = math.fsum(score.value for score in scores) / len(scores) if scores else None

    return (
        _in_range(len(scores), filters.min_score_count, filters.max_score_count)
        and _in_range(len(feedbacks), filters.min_reviews_count, filters.max_reviews_count)
        and _in_range(positive, filters.min_positive_reviews_count, filters.max_positive_reviews_count)
        and _in_range(
            len(feedbacks) - positive,
            filters.min_negative_reviews_count,
            filters.max_negative_reviews_count,
        )
        and _in_range(avg_score, filters.min_avg_score, filters.max_avg_score)
    )


def filter_prompts(index: SnapshotIndex, filters: CuratedFilter, as_of: datetime) -> List[Prompt]:
    """Select the prompts matching every supplied predicate, in prompt id order."""
    selected = [
        prompt for prompt in index.snapshot.prompts
        if matches_prompt_filters(index, prompt, filters, as_of)
        and matches_aggregate_filters(index, prompt, filters)
    ]
    selected.sort(key=lambda prompt: prompt.id)
    return selected


# ------------------------------------------------------------------------------------------------
# Stats, aggregation and ranking
# ------------------------------------------------------------------------------------------------

def calculate_curated_stats(index: SnapshotIndex, prompts: Sequence[Prompt]) -> CuratedStats:
    return CuratedStats(
        total_distinct_prompts=len(prompts),
        total_responses=sum(len(index.responses_by_prompt.get(prompt.id, [])) for prompt in prompts),
        total_scores=sum(len(index.scores_by_prompt.get(prompt.id, [])) for prompt in prompts),
    )


def calculate_prompt_set_distribution(
    index: SnapshotIndex,
    prompts: Sequence[Prompt],
) -> List[PromptSetDistribution]:
    counts = Counter(prompt.prompt_set_id for prompt in prompts)
    distribution = []
    for prompt_set_id, count in counts.items():
        benchmark = index.benchmarks_by_id.get(prompt_set_id) if prompt_set_id is not None else None
        distribution.append(PromptSetDistribution(
            prompt_set_id=prompt_set_id,
            prompt_set_title=benchmark.title if benchmark is not None else "",
            prompt_count=count,
        ))
    distribution.sort(key=lambda item: (-item.prompt_count, item.prompt_set_id or ""))
    return distribution


def score_weight(
    index: SnapshotIndex,
    score: Score,
    prompt: Prompt,
    filters: CuratedFilter,
    weighting: WeightingParameters,
    as_of: datetime,
) -> float:
    """Product of the prompt-age weight and the response-delay weight of one score."""
    age_weight = decay_weight(
        filters.prompt_age_weighting,
        prompt_age_days(prompt, as_of),
        weighting.prompt_age_max_days,
        weighting.prompt_age_half_life_days,
    )
    delay_weight = decay_weight(
        filters.response_delay_weighting,
        index.latency_for(score),
        weighting.response_delay_max_seconds,
        weighting.response_delay_half_life_seconds,
    )
    return age_weight * delay_weight


def aggregate_models(
    index: SnapshotIndex,
    prompts: Sequence[Prompt],
    filters: CuratedFilter,
    weighting: WeightingParameters,
    as_of: datetime,
) -> List[ModelLeaderboardEntry]:
    """Group the scores of the filtered prompts by model, before any coverage cutoff."""
    total_prompts = len(prompts)
    if total_prompts == 0:
        return []

    allowed_models = set(filters.model_slugs) if filters.model_slugs else None
    weighted: Dict[str, List[tuple]] = defaultdict(list)
    latencies: Dict[str, Dict[str, float]] = defaultdict(dict)

    for prompt in prompts:
        for score in sorted(index.scores_by_prompt.get(prompt.id, []), key=lambda item: item.id):
            if allowed_models is not None and score.model_id not in allowed_models:
                continue
            weight = score_weight(index, score, prompt, filters, weighting, as_of)
            weighted[score.model_id].append((prompt.id, weight, score.value))

        for response in index.responses_by_prompt.get(prompt.id, []):
            latency = index.latency_by_response.get(response.id)
            if latency is not None:
                latencies[response.model_id][response.id] = latency

    entries: List[ModelLeaderboardEntry] = []
    for model_id, rows in weighted.items():
        weight_sum = math.fsum(weight for _, weight, _ in rows)
        weighted_sum = math.fsum(weight * value for _, weight, value in rows)
        unique_prompts = len({prompt_id for prompt_id, _, _ in rows})
        model_latencies = latencies.get(model_id, {})

        entries.append(ModelLeaderboardEntry(
            model_id=model_id,
            avg_score=weighted_sum / weight_sum if weight_sum > 0 else 0.0,
            total_scores=len(rows),
            unique_prompts=unique_prompts,
            coverage=unique_prompts * 100 / total_prompts,
            avg_response_time=(
                math.fsum(model_latencies.values()) / len(model_latencies) if model_latencies else None
            ),
        ))
    return entries


def apply_coverage_cutoff(
    entries: Sequence[ModelLeaderboardEntry],
    min_coverage: Optional[float],
) -> List[ModelLeaderboardEntry]:
    """Drop models whose coverage (percent) is below ``min_coverage``; None keeps everything."""
    if min_coverage is None:
        return list(entries)
    return [entry for entry in entries if entry.coverage >= min_coverage]


def rank_models(entries: Sequence[ModelLeaderboardEntry]) -> List[ModelLeaderboardEntry]:
    return sorted(entries, key=lambda entry: (-entry.avg_score, -entry.total_scores, entry.model_id))


def calculate_curated_leaderboard(
    data: Union[Snapshot, SnapshotIndex],
    filters: Optional[Union[CuratedFilter, Mapping[str, Any]]] = None,
    weighting: Optional[Union[WeightingParameters, Mapping[str, Any]]] = None,
    as_of: Optional[datetime] = None,
) -> CuratedLeaderboardResult:
    """
    Calculate the curated model leaderboard.

    Args:
        data: Input snapshot, or an index already built over it
        filters: Curated filter; None selects every prompt
        weighting: Decay parameters (defaults when None)
        as_of: Reference time for prompt ages; defaults to now (UTC)

    Returns:
        CuratedLeaderboardResult: Ranked models, stats of the filtered set, the
            prompt set composition and any data integrity warnings

    Raises:
        ConfigurationError: If the filter or the weighting parameters are malformed
    """
    filters = build_config(CuratedFilter, filters)
    weighting = build_config(WeightingParameters, weighting)
    as_of = _as_utc(as_of) if as_of is not None else datetime.now(timezone.utc)
    index = as_index(data)

    prompts = filter_prompts(index, filters, as_of)
    stats = calculate_curated_stats(index, prompts)
    entries = aggregate_models(index, prompts, filters, weighting, as_of)
    kept = apply_coverage_cutoff(entries, filters.min_coverage)
    leaderboard = rank_models(kept)

    logger.info(
        f"Curated leaderboard: {stats.total_distinct_prompts} prompt(s), "
        f"{len(leaderboard)} model(s) ranked, {len(entries) - len(kept)} below coverage cutoff"
    )
    if not leaderboard:
        logger.info("No models matched the curated filters")

    return CuratedLeaderboardResult(
        leaderboard=leaderboard,
        stats=stats,
        prompt_set_distribution=calculate_prompt_set_distribution(index, prompts),
        warnings=list(index.warnings),
    )


__all__ = [
    "linear_decay",
    "exponential_decay",
    "decay_weight",
    "prompt_age_days",
    "matches_prompt_filters",
    "matches_aggregate_filters",
    "filter_prompts",
    "calculate_curated_stats",
    "calculate_prompt_set_distribution",
    "score_weight",
    "aggregate_models",
    "apply_coverage_cutoff",
    "rank_models",
    "calculate_curated_leaderboard",
]
