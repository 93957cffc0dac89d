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
Scoring configuration for the leaderboard scoring system.

This module contains the default values for every configurable parameter of
the engine: contributor and reviewer coefficients, the user reputation bonuses,
coefficients and thresholds, and the decay parameters of the curated model
leaderboard. Callers override them through ``leaderboard_scoring.core.config``.
"""

# Contributor leaderboard coefficients
CONTRIBUTOR_COEFFICIENTS = {
    'affiliation_bonus_points': 10,  # Flat bonus for users with an affiliation
    'quality_weight': 0.7,           # Weight of the average prompt quality
    'reputation_weight': 0.3,        # Weight of the reputation multiplier
    'reputation_cap': 2,             # Upper bound of the reputation multiplier
    'min_reviews_for_quality': 3     # Feedbacks needed before a prompt has a quality
}

# Reviewer leaderboard coefficients
REVIEWER_COEFFICIENTS = {
    'min_reviews_required': 5,       # Comparisons needed to appear on the leaderboard
    'min_consensus_reviewers': 2     # Other raters needed for a usable consensus
}

# User reputation score
USER_SCORE_BONUSES = {
    'affiliation_bonus': 50,
    'benchmark_creator_bonus': 100,
    'diverse_feedback_benchmarks_bonus': 30,
    'diverse_feedback_users_bonus': 40,
    'quality_prompts_bonus': 75,
    'difficult_prompts_bonus': 100,
    'sota_difficult_prompts_bonus': 150
}

USER_SCORE_COEFFICIENTS = {
    'h_index_coefficient': 2,            # Multiplies h^2
    'quality_prompts_coefficient': 5,    # Per quality prompt
    'feedback_activity_coefficient': 0.5,  # Per feedback given
    'collaboration_coefficient': 10      # Per distinct collaborator
}

USER_SCORE_THRESHOLDS = {
    'min_positive_feedbacks': 3,     # Positive feedbacks for a prompt to count as quality
    'min_benchmark_contributors': 3,
    'min_feedback_benchmarks': 3,
    'min_feedback_users': 5,
    'min_quality_prompts': 3,
    'min_difficult_prompts': 3,
    'wrong_answer_threshold': 0.5    # Mean model score below this stumps the models
}

SOTA_MODELS = [
    'claude-sonnet-4.5',
    'gpt-4o',
    'gpt-o1',
    'gemini-2.0-flash',
    'gemini-2.0-pro',
    'deepseek-v3'
]

# Decay parameters for the curated model leaderboard
WEIGHTING_PARAMETERS = {
    'prompt_age_max_days': 365,            # Linear decay reaches 0 at this age
    'prompt_age_half_life_days': 90,       # Exponential decay half-life
    'response_delay_max_seconds': 120,     # Linear decay reaches 0 at this latency
    'response_delay_half_life_seconds': 30
}

# Presentation bands for reviewer correlation (lower bound, label)
REVIEWER_LABEL_BANDS = [
    (0.7, 'excellent'),
    (0.3, 'good'),
    (0.0, 'fair')
]
REVIEWER_FALLBACK_LABEL = 'poor'

# Buckets used by the user score distribution (label, min, max)
USER_SCORE_DISTRIBUTION_BUCKETS = [
    ('0', 0, 0),
    ('1-50', 1, 50),
    ('51-100', 51, 100),
    ('101-200', 101, 200),
    ('201-500', 201, 500),
    ('501-1000', 501, 1000),
    ('1000+', 1001, float('inf'))
]
