"""Top-level package for the leaderboard scoring engine."""

from .core.config import (
    ContributorCoefficients,
    CuratedFilter,
    LeaderboardCoefficients,
    ReviewerCoefficients,
    ScoringConfig,
    UserScoreConfig,
    WeightingParameters,
    load_scoring_config,
)
from .core.exceptions import (
    ConfigurationError,
    DataIntegrityWarning,
    RecordValidationError,
    SnapshotError,
)
from .data.loaders import load_snapshot
from .run_scoring import (
    calculate_curated_leaderboard,
    calculate_leaderboards,
    calculate_user_score_results,
    export_results_as_json,
    save_results,
)

__all__ = [
    "ContributorCoefficients",
    "ReviewerCoefficients",
    "LeaderboardCoefficients",
    "UserScoreConfig",
    "WeightingParameters",
    "CuratedFilter",
    "ScoringConfig",
    "load_scoring_config",
    "ConfigurationError",
    "SnapshotError",
    "RecordValidationError",
    "DataIntegrityWarning",
    "load_snapshot",
    "calculate_leaderboards",
    "calculate_user_score_results",
    "calculate_curated_leaderboard",
    "export_results_as_json",
    "save_results",
]
