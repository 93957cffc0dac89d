"""
Validated configuration objects for the leaderboard scoring system.

Every coefficient set, threshold set and filter is a frozen pydantic model.
Unknown keys, non-finite numbers, negative counts and reversed ranges are all
rejected here, once, before any scoring begins. Numeric fields are strict, so
booleans and numeric strings are not coerced. Builders translate pydantic's
``ValidationError`` into ``ConfigurationError`` so callers deal with a single
exception type.

Keys are snake_case; the camelCase spellings used by the web UI are accepted
as aliases.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Tuple, Type, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from config.scoring_config import (
    CONTRIBUTOR_COEFFICIENTS,
    REVIEWER_COEFFICIENTS,
    SOTA_MODELS,
    USER_SCORE_BONUSES,
    USER_SCORE_COEFFICIENTS,
    USER_SCORE_THRESHOLDS,
    WEIGHTING_PARAMETERS,
)

from .constants import COVERAGE_BOUNDS, SCORE_BOUNDS
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)

WeightingMode = Literal["none", "linear", "exponential"]

_STRICT_CONFIG = ConfigDict(
    extra="forbid",
    frozen=True,
    allow_inf_nan=False,
    populate_by_name=True,
    alias_generator=to_camel,
    protected_namespaces=(),
)


class ContributorCoefficients(BaseModel):
    """Coefficients of the contributor leaderboard."""

    model_config = _STRICT_CONFIG

    affiliation_bonus_points: float = Field(CONTRIBUTOR_COEFFICIENTS['affiliation_bonus_points'], ge=0, strict=True)
    quality_weight: float = Field(CONTRIBUTOR_COEFFICIENTS['quality_weight'], ge=0, strict=True)
    reputation_weight: float = Field(CONTRIBUTOR_COEFFICIENTS['reputation_weight'], ge=0, strict=True)
    reputation_cap: float = Field(CONTRIBUTOR_COEFFICIENTS['reputation_cap'], ge=1, strict=True)
    min_reviews_for_quality: int = Field(CONTRIBUTOR_COEFFICIENTS['min_reviews_for_quality'], ge=0, strict=True)


class ReviewerCoefficients(BaseModel):
    """Coefficients of the reviewer leaderboard."""

    model_config = _STRICT_CONFIG

    min_reviews_required: int = Field(REVIEWER_COEFFICIENTS['min_reviews_required'], ge=0, strict=True)
    min_consensus_reviewers: int = Field(REVIEWER_COEFFICIENTS['min_consensus_reviewers'], ge=1, strict=True)


class LeaderboardCoefficients(BaseModel):
    """Both leaderboard coefficient sets, as edited together in the UI."""

    model_config = _STRICT_CONFIG

    contributor: ContributorCoefficients = Field(default_factory=ContributorCoefficients)
    reviewer: ReviewerCoefficients = Field(default_factory=ReviewerCoefficients)


class UserScoreConfig(BaseModel):
    """Bonuses, coefficients and thresholds of the user reputation score."""

    model_config = _STRICT_CONFIG

    # One-time bonuses
    affiliation_bonus: float = Field(USER_SCORE_BONUSES['affiliation_bonus'], ge=0, strict=True)
    benchmark_creator_bonus: float = Field(USER_SCORE_BONUSES['benchmark_creator_bonus'], ge=0, strict=True)
    diverse_feedback_benchmarks_bonus: float = Field(USER_SCORE_BONUSES['diverse_feedback_benchmarks_bonus'], ge=0, strict=True)
    diverse_feedback_users_bonus: float = Field(USER_SCORE_BONUSES['diverse_feedback_users_bonus'], ge=0, strict=True)
    quality_prompts_bonus: float = Field(USER_SCORE_BONUSES['quality_prompts_bonus'], ge=0, strict=True)
    difficult_prompts_bonus: float = Field(USER_SCORE_BONUSES['difficult_prompts_bonus'], ge=0, strict=True)
    sota_difficult_prompts_bonus: float = Field(USER_SCORE_BONUSES['sota_difficult_prompts_bonus'], ge=0, strict=True)

    # Continuous coefficients
    h_index_coefficient: float = Field(USER_SCORE_COEFFICIENTS['h_index_coefficient'], ge=0, strict=True)
    quality_prompts_coefficient: float = Field(USER_SCORE_COEFFICIENTS['quality_prompts_coefficient'], ge=0, strict=True)
    feedback_activity_coefficient: float = Field(USER_SCORE_COEFFICIENTS['feedback_activity_coefficient'], ge=0, strict=True)
    collaboration_coefficient: float = Field(USER_SCORE_COEFFICIENTS['collaboration_coefficient'], ge=0, strict=True)

    # Thresholds
    min_positive_feedbacks: int = Field(USER_SCORE_THRESHOLDS['min_positive_feedbacks'], ge=0, strict=True)
    min_benchmark_contributors: int = Field(USER_SCORE_THRESHOLDS['min_benchmark_contributors'], ge=0, strict=True)
    min_feedback_benchmarks: int = Field(USER_SCORE_THRESHOLDS['min_feedback_benchmarks'], ge=0, strict=True)
    min_feedback_users: int = Field(USER_SCORE_THRESHOLDS['min_feedback_users'], ge=0, strict=True)
    min_quality_prompts: int = Field(USER_SCORE_THRESHOLDS['min_quality_prompts'], ge=0, strict=True)
    min_difficult_prompts: int = Field(USER_SCORE_THRESHOLDS['min_difficult_prompts'], ge=0, strict=True)
    wrong_answer_threshold: float = Field(USER_SCORE_THRESHOLDS['wrong_answer_threshold'], ge=0, le=1, strict=True)

    sota_models: Tuple[str, ...] = Field(default_factory=lambda: tuple(SOTA_MODELS))

    @field_validator('sota_models')
    @classmethod
    def validate_sota_models(cls, v):
        cleaned = tuple(item.strip() for item in v if item and item.strip())
        if len(cleaned) != len(v):
            raise ValueError('SOTA model names cannot be empty')
        return cleaned


class WeightingParameters(BaseModel):
    """Decay parameters used when the curated leaderboard reweights scores."""

    model_config = _STRICT_CONFIG

    prompt_age_max_days: float = Field(WEIGHTING_PARAMETERS['prompt_age_max_days'], gt=0, strict=True)
    prompt_age_half_life_days: float = Field(WEIGHTING_PARAMETERS['prompt_age_half_life_days'], gt=0, strict=True)
    response_delay_max_seconds: float = Field(WEIGHTING_PARAMETERS['response_delay_max_seconds'], gt=0, strict=True)
    response_delay_half_life_seconds: float = Field(WEIGHTING_PARAMETERS['response_delay_half_life_seconds'], gt=0, strict=True)


_RANGE_PAIRS = (
    ('min_score_count', 'max_score_count'),
    ('min_reviews_count', 'max_reviews_count'),
    ('min_positive_reviews_count', 'max_positive_reviews_count'),
    ('min_negative_reviews_count', 'max_negative_reviews_count'),
    ('min_avg_score', 'max_avg_score'),
)


class CuratedFilter(BaseModel):
    """
    Filters of the curated model leaderboard.

    Every field is optional; an empty filter selects the whole corpus. Count and
    average ranges are inclusive and evaluated after per-prompt aggregation.
    """

    model_config = _STRICT_CONFIG

    tags: Optional[Tuple[str, ...]] = None
    prompt_types: Optional[Tuple[str, ...]] = None
    prompt_set_ids: Optional[Tuple[str, ...]] = None
    uploader_id: Optional[str] = None
    model_slugs: Optional[Tuple[str, ...]] = None

    min_score_count: Optional[int] = Field(None, ge=0, strict=True)
    max_score_count: Optional[int] = Field(None, ge=0, strict=True)
    min_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    max_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    min_positive_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    max_positive_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    min_negative_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    max_negative_reviews_count: Optional[int] = Field(None, ge=0, strict=True)
    min_avg_score: Optional[float] = Field(None, ge=SCORE_BOUNDS['MIN'], le=SCORE_BOUNDS['MAX'], strict=True)
    max_avg_score: Optional[float] = Field(None, ge=SCORE_BOUNDS['MIN'], le=SCORE_BOUNDS['MAX'], strict=True)

    max_prompt_age_days: Optional[float] = Field(None, gt=0, strict=True)
    max_gap_to_first_response: Optional[float] = Field(None, ge=0, strict=True)

    min_coverage: Optional[float] = Field(None, ge=COVERAGE_BOUNDS['MIN'], le=COVERAGE_BOUNDS['MAX'], strict=True)
    prompt_age_weighting: WeightingMode = "none"
    response_delay_weighting: WeightingMode = "none"

    @field_validator('tags', 'prompt_types', 'prompt_set_ids', mode='before')
    @classmethod
    def coerce_string_sequence(cls, v):
        if v is None:
            return v
        if isinstance(v, (str, int)):
            v = [v]
        return tuple(str(item) for item in v)

    @field_validator('model_slugs', mode='before')
    @classmethod
    def split_model_slugs(cls, v):
        if v is None:
            return v
        if isinstance(v, str):
            v = v.split(',')
        slugs = tuple(str(item).strip() for item in v if str(item).strip())
        return slugs or None

    @model_validator(mode='after')
    def validate_ranges(self):
        for low_name, high_name in _RANGE_PAIRS:
            low = getattr(self, low_name)
            high = getattr(self, high_name)
            if low is not None and high is not None and low > high:
                raise ValueError(f'{low_name} ({low}) cannot exceed {high_name} ({high})')
        return self


class ScoringConfig(BaseModel):
    """Complete engine configuration as loaded from a YAML or JSON file."""

    model_config = _STRICT_CONFIG

    contributor: ContributorCoefficients = Field(default_factory=ContributorCoefficients)
    reviewer: ReviewerCoefficients = Field(default_factory=ReviewerCoefficients)
    user_score: UserScoreConfig = Field(default_factory=UserScoreConfig)
    weighting: WeightingParameters = Field(default_factory=WeightingParameters)

    @property
    def leaderboard(self) -> LeaderboardCoefficients:
        return LeaderboardCoefficients(contributor=self.contributor, reviewer=self.reviewer)


def _format_validation_error(name: str, exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or name
        problems.append(f"{location}: {error.get('msg')}")
    return f"Invalid {name}: " + "; ".join(problems)


def build_config(model_cls: Type[ConfigT], payload: Any = None) -> ConfigT:
    """
    Build and validate a configuration object.

    Args:
        model_cls: The configuration model to build
        payload: None for defaults, an existing instance, or a mapping of overrides

    Returns:
        A validated, immutable configuration instance

    Raises:
        ConfigurationError: If the payload is not a mapping or fails validation
    """
    if payload is None:
        return model_cls()
    if isinstance(payload, model_cls):
        return payload
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            f"{model_cls.__name__} must be a mapping, got {type(payload).__name__}"
        )
    try:
        return model_cls.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigurationError(_format_validation_error(model_cls.__name__, exc)) from exc


def load_config_file(config_path: Path | str) -> dict:
    """Load a configuration document from a YAML or JSON file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            raise ConfigurationError("Config file must be .yaml, .yml, or .json")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid config file '{path}': {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config file '{path}' must contain a mapping")
    return payload


def load_scoring_config(config_path: Optional[Path | str] = None) -> ScoringConfig:
    """Load the engine configuration, falling back to defaults when no path is given."""
    if config_path is None:
        return ScoringConfig()
    config = build_config(ScoringConfig, load_config_file(config_path))
    logger.info(f"Loaded scoring configuration from '{config_path}'")
    return config


__all__ = [
    "ContributorCoefficients",
    "ReviewerCoefficients",
    "LeaderboardCoefficients",
    "UserScoreConfig",
    "WeightingParameters",
    "CuratedFilter",
    "ScoringConfig",
    "build_config",
    "load_config_file",
    "load_scoring_config",
]
