"""Tests for the descriptive statistics."""

from datetime import datetime, timezone

import pytest

from builders import feedback, prompt, response, snapshot, user
from leaderboard_scoring.core.types import (
    BonusComponents,
    ContinuousComponents,
    UserScoreComponents,
    UserScoreEntry,
)
from leaderboard_scoring.scoring.stats import (
    calculate_leaderboard_stats,
    calculate_user_score_stats,
    format_stats_for_console,
    format_user_score_stats,
    score_bucket,
)


def _entry(user_id, total):
    components = UserScoreComponents(
        bonuses=BonusComponents(),
        continuous=ContinuousComponents(),
        total_bonuses=0.0,
        total_continuous=total,
        total_score=total,
    )
    return UserScoreEntry(
        user_id=user_id,
        display_name=user_id,
        total_score=total,
        components=components,
        prompts_created=0,
        feedbacks_given=0,
        benchmarks_owned=0,
    )


def test_leaderboard_stats(sample_snapshot):
    stats = calculate_leaderboard_stats(sample_snapshot)

    assert stats.total_users == 8
    assert stats.total_prompts == 7
    assert stats.total_feedbacks == 21
    assert (stats.positive_feedbacks, stats.negative_feedbacks) == (14, 7)
    assert stats.prompts_with_no_reviews == 0
    assert stats.prompts_with_1_review == 0
    assert stats.prompts_with_2_reviews == 1
    assert stats.prompts_with_3_plus_reviews == 6
    assert stats.avg_reviews_per_prompt == pytest.approx(3.0)
    assert stats.total_reviewers == 7
    assert stats.reviewers_with_5_plus_reviews == 3
    assert stats.oldest_feedback_date is None


def test_leaderboard_stats_ignore_response_feedback_and_track_dates():
    early = datetime(2025, 1, 1, tzinfo=timezone.utc)
    late = datetime(2025, 2, 1, tzinfo=timezone.utc)
    data = snapshot(
        users=[user("author", affiliated=True), user("bob")],
        prompts=[prompt("p1"), prompt("p2")],
        responses=[response("r1", "p1", "m")],
        feedbacks=[
            feedback("bob", "p1", "positive", created_at=late),
            feedback("bob", "p2", "negative", created_at=early),
            feedback("bob", "p1", "positive", response_id="r1"),
        ],
    )

    stats = calculate_leaderboard_stats(data)

    assert stats.total_feedbacks == 2
    assert stats.users_with_affiliation == 1
    assert stats.oldest_feedback_date == early
    assert stats.newest_feedback_date == late
    assert "2025-01-01 to 2025-02-01" in format_stats_for_console(stats)


def test_empty_snapshot_stats():
    stats = calculate_leaderboard_stats(snapshot())

    assert stats.avg_reviews_per_prompt == 0.0
    assert stats.avg_reviews_per_reviewer == 0.0
    assert format_stats_for_console(stats).splitlines()[0] == "Leaderboard data statistics"


@pytest.mark.parametrize(
    "score, label",
    [
        (0, "0"),
        (-3, "0"),
        (0.5, "1-50"),
        (50, "1-50"),
        (50.5, "51-100"),
        (200, "101-200"),
        (1000, "501-1000"),
        (1000.5, "1000+"),
        (25000, "1000+"),
    ],
)
def test_score_bucket(score, label):
    assert score_bucket(score) == label


def test_user_score_stats():
    data = snapshot(prompts=[prompt("p1"), prompt("p2")])
    entries = [_entry(f"u{i}", total) for i, total in enumerate([150, 0, 2000, 10, 60])]

    stats = calculate_user_score_stats(entries, data)

    assert stats.total_users == 5
    assert stats.users_with_score == 4
    assert stats.average_score == pytest.approx(444)
    assert stats.median_score == 60
    assert stats.top_10_percentile_score == 2000
    assert stats.average_prompts_per_user == pytest.approx(0.4)
    counts = {bucket["range"]: bucket["count"] for bucket in stats.scores_distribution}
    assert counts == {
        "0": 1,
        "1-50": 1,
        "51-100": 1,
        "101-200": 1,
        "201-500": 0,
        "501-1000": 0,
        "1000+": 1,
    }


def test_user_score_stats_without_users():
    stats = calculate_user_score_stats([], snapshot())

    assert stats.average_score == 0.0
    assert stats.median_score == 0.0
    assert all(bucket["count"] == 0 for bucket in stats.scores_distribution)
    assert format_user_score_stats(stats).splitlines()[0] == "User score statistics"
