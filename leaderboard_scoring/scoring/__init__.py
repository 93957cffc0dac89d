"""Scorers for the contributor, reviewer, user reputation and curated model leaderboards."""

from .contributor_scoring import calculate_contributor_scores
from .curated_leaderboard import calculate_curated_leaderboard
from .reviewer_scoring import calculate_reviewer_scores
from .user_scoring import calculate_user_scores

__all__ = [
    "calculate_contributor_scores",
    "calculate_reviewer_scores",
    "calculate_user_scores",
    "calculate_curated_leaderboard",
]
