"""
Type definitions for the leaderboard scoring system.

Input records are frozen dataclasses: the engine only ever reads them. Result
entries are plain dataclasses built fresh for every computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .constants import OPINION_VALUES, POSITIVE, TAG_SOURCES
from .exceptions import DataIntegrityWarning


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _dataclass_dict(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return {item.name: _dataclass_dict(getattr(obj, item.name)) for item in fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [_dataclass_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _dataclass_dict(value) for key, value in obj.items()}
    return obj


# ------------------------------------------------------------------------------------------------
# Input records
# ------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class User:
    """A platform user. Affiliation is a one-time flag set outside the engine."""

    id: str
    display_name: str = ""
    has_affiliation: bool = False


@dataclass(frozen=True)
class Prompt:
    """A test question contributed by a user. Quality is derived, never stored."""

    id: str
    author_id: str
    created_at: Optional[datetime] = None
    type: Optional[str] = None
    prompt_set_id: Optional[str] = None
    tags: Tuple[str, ...] = ()
    generator_tags: Tuple[str, ...] = ()
    article_tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _as_tuple(self.tags))
        object.__setattr__(self, "generator_tags", _as_tuple(self.generator_tags))
        object.__setattr__(self, "article_tags", _as_tuple(self.article_tags))

    def all_tags(self) -> FrozenSet[str]:
        return frozenset().union(*(getattr(self, source) for source in TAG_SOURCES))


@dataclass(frozen=True)
class Feedback:
    """
    A quick positive/negative opinion on a prompt, or on a model response to it.

    When ``target_response_id`` is set the feedback targets the model-response
    pair rather than the prompt itself.
    """

    id: str
    reviewer_id: str
    target_prompt_id: str
    opinion: str
    flags: Tuple[str, ...] = ()
    target_response_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", _as_tuple(self.flags))

    @property
    def value(self) -> int:
        return OPINION_VALUES[self.opinion]

    @property
    def is_positive(self) -> bool:
        return self.opinion == POSITIVE

    @property
    def target(self) -> Tuple[str, Optional[str]]:
        return (self.target_prompt_id, self.target_response_id)


@dataclass(frozen=True)
class Score:
    """A model's score on a prompt. ``value`` is None when the score is missing."""

    id: str
    prompt_id: str
    model_id: str
    value: Optional[float] = None
    response_id: Optional[str] = None


@dataclass(frozen=True)
class Response:
    """A model response, used to derive latency."""

    id: str
    prompt_id: str
    model_id: str
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def latency_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


@dataclass(frozen=True)
class Benchmark:
    """A prompt set. Contributors are merged with the authors of its prompts."""

    id: str
    owner_id: str
    title: str = ""
    contributor_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "contributor_ids", _as_tuple(self.contributor_ids))


@dataclass(frozen=True)
class Collaboration:
    """A role held by a user on a prompt set they do not necessarily own."""

    user_id: str
    prompt_set_id: str
    role: str = "collaborator"


@dataclass(frozen=True)
class Snapshot:
    """Immutable bundle of every record a computation reads."""

    users: Tuple[User, ...] = ()
    prompts: Tuple[Prompt, ...] = ()
    feedbacks: Tuple[Feedback, ...] = ()
    scores: Tuple[Score, ...] = ()
    responses: Tuple[Response, ...] = ()
    benchmarks: Tuple[Benchmark, ...] = ()
    collaborations: Tuple[Collaboration, ...] = ()

    def __post_init__(self) -> None:
        for item in fields(self):
            object.__setattr__(self, item.name, _as_tuple(getattr(self, item.name)))


# ------------------------------------------------------------------------------------------------
# Contributor and reviewer leaderboards
# ------------------------------------------------------------------------------------------------

@dataclass(slots=True)
class ContributorLeaderboardEntry:
    user_id: str
    display_name: str
    total_score: float
    quality_score: float
    affiliation_bonus: float
    prompt_count: int
    avg_prompt_quality: float
    reputation_multiplier: float

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class ReviewerLeaderboardEntry:
    user_id: str
    display_name: str
    pearson_correlation: float
    review_count: int
    label: str

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class LeaderboardStats:
    """Descriptive statistics of the input data behind the two leaderboards."""

    total_users: int = 0
    total_prompts: int = 0
    total_feedbacks: int = 0
    prompts_with_no_reviews: int = 0
    prompts_with_1_review: int = 0
    prompts_with_2_reviews: int = 0
    prompts_with_3_plus_reviews: int = 0
    avg_reviews_per_prompt: float = 0.0
    total_reviewers: int = 0
    reviewers_with_5_plus_reviews: int = 0
    avg_reviews_per_reviewer: float = 0.0
    users_with_affiliation: int = 0
    positive_feedbacks: int = 0
    negative_feedbacks: int = 0
    oldest_feedback_date: Optional[datetime] = None
    newest_feedback_date: Optional[datetime] = None

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class LeaderboardResults:
    contributor_leaderboard: List[ContributorLeaderboardEntry]
    reviewer_leaderboard: List[ReviewerLeaderboardEntry]
    stats: LeaderboardStats
    coefficients: Any
    calculated_at: datetime
    warnings: List[DataIntegrityWarning] = field(default_factory=list)

    @property
    def insufficient_data(self) -> bool:
        return not self.contributor_leaderboard and not self.reviewer_leaderboard


# ------------------------------------------------------------------------------------------------
# User reputation score
# ------------------------------------------------------------------------------------------------

@dataclass(slots=True)
class BonusComponents:
    """One-time bonuses: each flag is either fully granted or worth 0 points."""

    has_affiliation: bool = False
    affiliation_points: float = 0.0
    has_benchmark_creator: bool = False
    benchmark_creator_points: float = 0.0
    has_diverse_feedback_benchmarks: bool = False
    diverse_feedback_benchmarks_points: float = 0.0
    has_diverse_feedback_users: bool = False
    diverse_feedback_users_points: float = 0.0
    has_quality_prompts: bool = False
    quality_prompts_points: float = 0.0
    has_difficult_prompts: bool = False
    difficult_prompts_points: float = 0.0
    has_sota_difficult_prompts: bool = False
    sota_difficult_prompts_points: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.affiliation_points
            + self.benchmark_creator_points
            + self.diverse_feedback_benchmarks_points
            + self.diverse_feedback_users_points
            + self.quality_prompts_points
            + self.difficult_prompts_points
            + self.sota_difficult_prompts_points
        )


@dataclass(slots=True)
class ContinuousComponents:
    """Activity metrics: raw values and the points they are worth."""

    h_index: int = 0
    h_index_points: float = 0.0
    quality_prompts_count: int = 0
    quality_prompts_points: float = 0.0
    feedback_count: int = 0
    feedback_activity_points: float = 0.0
    collaborator_count: int = 0
    collaboration_points: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.h_index_points
            + self.quality_prompts_points
            + self.feedback_activity_points
            + self.collaboration_points
        )


@dataclass(slots=True)
class UserScoreComponents:
    bonuses: BonusComponents
    continuous: ContinuousComponents
    total_bonuses: float
    total_continuous: float
    total_score: float


@dataclass(slots=True)
class UserScoreEntry:
    user_id: str
    display_name: str
    total_score: float
    components: UserScoreComponents
    prompts_created: int
    feedbacks_given: int
    benchmarks_owned: int

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class UserScoreStats:
    total_users: int = 0
    users_with_score: int = 0
    average_score: float = 0.0
    median_score: float = 0.0
    top_10_percentile_score: float = 0.0
    scores_distribution: List[Dict[str, Any]] = field(default_factory=list)
    total_prompts: int = 0
    total_feedbacks: int = 0
    total_benchmarks: int = 0
    average_prompts_per_user: float = 0.0
    average_feedbacks_per_user: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class UserScoreResults:
    scores: List[UserScoreEntry]
    stats: UserScoreStats
    config: Any
    calculated_at: datetime
    warnings: List[DataIntegrityWarning] = field(default_factory=list)

    @property
    def insufficient_data(self) -> bool:
        return not self.scores


# ------------------------------------------------------------------------------------------------
# Curated model leaderboard
# ------------------------------------------------------------------------------------------------

@dataclass(slots=True)
class ModelLeaderboardEntry:
    model_id: str
    avg_score: float
    total_scores: int
    unique_prompts: int
    coverage: float
    avg_response_time: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class CuratedStats:
    total_distinct_prompts: int = 0
    total_responses: int = 0
    total_scores: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class PromptSetDistribution:
    prompt_set_id: Optional[str]
    prompt_set_title: str
    prompt_count: int

    def as_dict(self) -> Dict[str, Any]:
        return _dataclass_dict(self)


@dataclass(slots=True)
class CuratedLeaderboardResult:
    leaderboard: List[ModelLeaderboardEntry]
    stats: CuratedStats
    prompt_set_distribution: List[PromptSetDistribution]
    warnings: List[DataIntegrityWarning] = field(default_factory=list)

    @property
    def insufficient_data(self) -> bool:
        return not self.leaderboard


__all__ = [
    "User",
    "Prompt",
    "Feedback",
    "Score",
    "Response",
    "Benchmark",
    "Collaboration",
    "Snapshot",
    "ContributorLeaderboardEntry",
    "ReviewerLeaderboardEntry",
    "LeaderboardStats",
    "LeaderboardResults",
    "BonusComponents",
    "ContinuousComponents",
    "UserScoreComponents",
    "UserScoreEntry",
    "UserScoreStats",
    "UserScoreResults",
    "ModelLeaderboardEntry",
    "CuratedStats",
    "PromptSetDistribution",
    "CuratedLeaderboardResult",
]
