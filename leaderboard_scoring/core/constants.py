"""
Constants for the leaderboard scoring system.

This module defines the constants used throughout the engine, including
opinion values, score bounds, tag sources, weighting modes and directory paths.
"""

# Opinion labels and their numeric mapping
POSITIVE = "positive"
NEGATIVE = "negative"

OPINION_VALUES = {
    POSITIVE: 1,
    NEGATIVE: -1
}

# Bounds of an individual model score
SCORE_BOUNDS = {
    "MIN": 0.0,
    "MAX": 1.0
}

# Bounds of the curated leaderboard coverage cutoff (percent)
COVERAGE_BOUNDS = {
    "MIN": 0.0,
    "MAX": 100.0
}

# Prompt attributes searched by the tag filter
TAG_SOURCES = ("tags", "generator_tags", "article_tags")

# Weighting modes for the curated leaderboard
WEIGHTING_NONE = "none"
WEIGHTING_LINEAR = "linear"
WEIGHTING_EXPONENTIAL = "exponential"

SECONDS_PER_DAY = 86400.0

# Directory and file constants
RESULTS_DIR = "Results"

# Record sections expected in a snapshot file, and the fields each record requires
REQUIRED_FIELDS = {
    'users': ['id'],
    'prompts': ['id', 'author_id'],
    'feedbacks': ['id', 'reviewer_id', 'target_prompt_id', 'opinion'],
    'scores': ['id', 'prompt_id', 'model_id'],
    'responses': ['id', 'prompt_id', 'model_id'],
    'benchmarks': ['id', 'owner_id'],
    'collaborations': ['user_id', 'prompt_set_id']
}
