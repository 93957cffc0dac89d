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
Configuration module for the leaderboard scoring system.

This module provides centralized default values for the scoring system,
including coefficients, thresholds, and decay parameters.
"""

from .scoring_config import (
    CONTRIBUTOR_COEFFICIENTS,
    REVIEWER_COEFFICIENTS,
    USER_SCORE_BONUSES,
    USER_SCORE_COEFFICIENTS,
    USER_SCORE_THRESHOLDS,
    SOTA_MODELS,
    WEIGHTING_PARAMETERS,
    REVIEWER_LABEL_BANDS,
    REVIEWER_FALLBACK_LABEL,
    USER_SCORE_DISTRIBUTION_BUCKETS
)
