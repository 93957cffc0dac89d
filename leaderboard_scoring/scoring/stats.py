"""
Descriptive statistics for the leaderboard scoring system.

Two families are provided: statistics of the raw input data behind the
contributor and reviewer leaderboards, and statistics of a computed set of
user reputation scores.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Union

from config.scoring_config import USER_SCORE_DISTRIBUTION_BUCKETS

from ..core.types import LeaderboardStats, Snapshot, UserScoreEntry, UserScoreStats
from ..data.index import SnapshotIndex, as_index

# Reviewers at or above this many reviews are counted as active
ACTIVE_REVIEWER_THRESHOLD = 5


def calculate_leaderboard_stats(data: Union[Snapshot, SnapshotIndex]) -> LeaderboardStats:
    """
    Calculate statistics of the feedback data behind the leaderboards.

    Counts are taken over usable prompt feedback (self-feedback, duplicates and
    orphans already excluded by the index).
    """
    index = as_index(data)
    snapshot = index.snapshot
    stats = LeaderboardStats()

    stats.total_users = len(snapshot.users)
    stats.total_prompts = len(snapshot.prompts)
    stats.users_with_affiliation = sum(1 for user in snapshot.users if user.has_affiliation)

    feedbacks = [feedback for feedback in index.feedbacks if feedback.target_response_id is None]
    stats.total_feedbacks = len(feedbacks)
    stats.positive_feedbacks = sum(1 for feedback in feedbacks if feedback.is_positive)
    stats.negative_feedbacks = stats.total_feedbacks - stats.positive_feedbacks

    for prompt in snapshot.prompts:
        review_count = len(index.feedbacks_by_prompt.get(prompt.id, []))
        if review_count == 0:
            stats.prompts_with_no_reviews += 1
        elif review_count == 1:
            stats.prompts_with_1_review += 1
        elif review_count == 2:
            stats.prompts_with_2_reviews += 1
        else:
            stats.prompts_with_3_plus_reviews += 1

    if stats.total_prompts:
        stats.avg_reviews_per_prompt = stats.total_feedbacks / stats.total_prompts

    reviews_per_reviewer = {}
    for feedback in feedbacks:
        reviews_per_reviewer[feedback.reviewer_id] = reviews_per_reviewer.get(feedback.reviewer_id, 0) + 1
    stats.total_reviewers = len(reviews_per_reviewer)
    stats.reviewers_with_5_plus_reviews = sum(
        1 for count in reviews_per_reviewer.values() if count >= ACTIVE_REVIEWER_THRESHOLD
    )
    if stats.total_reviewers:
        stats.avg_reviews_per_reviewer = stats.total_feedbacks / stats.total_reviewers

    dates = [feedback.created_at for feedback in feedbacks if feedback.created_at is not None]
    if dates:
        stats.oldest_feedback_date = min(dates)
        stats.newest_feedback_date = max(dates)

    return stats


def format_stats_for_console(stats: LeaderboardStats) -> str:
    """Render leaderboard statistics as a plain text block."""
    lines = [
        "Leaderboard data statistics",
        "-" * 40,
        f"Users:                      {stats.total_users} ({stats.users_with_affiliation} affiliated)",
        f"Prompts:                    {stats.total_prompts}",
        f"  with no reviews:          {stats.prompts_with_no_reviews}",
        f"  with 1 review:            {stats.prompts_with_1_review}",
        f"  with 2 reviews:           {stats.prompts_with_2_reviews}",
        f"  with 3+ reviews:          {stats.prompts_with_3_plus_reviews}",
        f"Feedbacks:                  {stats.total_feedbacks} "
        f"(+{stats.positive_feedbacks} / -{stats.negative_feedbacks})",
        f"Avg reviews per prompt:     {stats.avg_reviews_per_prompt:.2f}",
        f"Reviewers:                  {stats.total_reviewers} "
        f"({stats.reviewers_with_5_plus_reviews} with {ACTIVE_REVIEWER_THRESHOLD}+ reviews)",
        f"Avg reviews per reviewer:   {stats.avg_reviews_per_reviewer:.2f}",
    ]
    if stats.oldest_feedback_date is not None:
        lines.append(
            f"Feedback period:            {stats.oldest_feedback_date:%Y-%m-%d} "
            f"to {stats.newest_feedback_date:%Y-%m-%d}"
        )
    return "\n".join(lines)


def score_bucket(score: float) -> str:
    """Label of the distribution bucket a score falls into."""
    if score <= 0:
        return USER_SCORE_DISTRIBUTION_BUCKETS[0][0]
    for label, _, upper in USER_SCORE_DISTRIBUTION_BUCKETS[1:]:
        if score <= upper:
            return label
    return USER_SCORE_DISTRIBUTION_BUCKETS[-1][0]


def _percentile_value(ordered: Sequence[float], fraction: float) -> float:
    position = min(len(ordered) - 1, int(math.floor(len(ordered) * fraction)))
    return ordered[position]


def calculate_user_score_stats(
    entries: Iterable[UserScoreEntry],
    data: Union[Snapshot, SnapshotIndex],
) -> UserScoreStats:
    """
    Calculate statistics over a set of user reputation scores.

    The median is the upper median (``sorted[n // 2]``) and the top 10% threshold
    is the score at position ``floor(n * 0.9)`` of the ascending order.
    """
    index = as_index(data)
    entries = list(entries)
    stats = UserScoreStats()

    stats.total_users = len(entries)
    stats.total_prompts = len(index.snapshot.prompts)
    stats.total_feedbacks = len(index.feedbacks)
    stats.total_benchmarks = len(index.snapshot.benchmarks)

    scores: List[float] = sorted(entry.total_score for entry in entries)
    stats.users_with_score = sum(1 for score in scores if score > 0)

    counts = {label: 0 for label, _, _ in USER_SCORE_DISTRIBUTION_BUCKETS}
    for score in scores:
        counts[score_bucket(score)] += 1
    stats.scores_distribution = [
        {"range": label, "count": counts[label]} for label, _, _ in USER_SCORE_DISTRIBUTION_BUCKETS
    ]

    if scores:
        stats.average_score = math.fsum(scores) / len(scores)
        stats.median_score = scores[len(scores) // 2]
        stats.top_10_percentile_score = _percentile_value(scores, 0.9)
        stats.average_prompts_per_user = stats.total_prompts / stats.total_users
        stats.average_feedbacks_per_user = stats.total_feedbacks / stats.total_users

    return stats


def format_user_score_stats(stats: UserScoreStats) -> str:
    """Render user score statistics as a plain text block."""
    lines = [
        "User score statistics",
        "-" * 40,
        f"Users:                      {stats.total_users} ({stats.users_with_score} with a score)",
        f"Average score:              {stats.average_score:.2f}",
        f"Median score:               {stats.median_score:.2f}",
        f"Top 10% threshold:          {stats.top_10_percentile_score:.2f}",
        f"Avg prompts per user:       {stats.average_prompts_per_user:.2f}",
        f"Avg feedbacks per user:     {stats.average_feedbacks_per_user:.2f}",
        "Distribution:",
    ]
    for bucket in stats.scores_distribution:
        lines.append(f"  {bucket['range']:<10} {bucket['count']}")
    return "\n".join(lines)


__all__ = [
    "calculate_leaderboard_stats",
    "format_stats_for_console",
    "score_bucket",
    "calculate_user_score_stats",
    "format_user_score_stats",
]
