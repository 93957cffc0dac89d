"""CLI tests for the scoring commands."""
from __future__ import annotations

import csv
import json
from pathlib import Path

from leaderboard_scoring.cli import app


def test_leaderboards_json(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["leaderboards", str(snapshot_file), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    contributor = payload["contributor_leaderboard"][0]
    assert contributor["user_id"] == "author"
    assert contributor["affiliation_bonus"] == 10.0
    assert payload["reviewer_leaderboard"] == []
    assert payload["insufficient_data"] is False
    assert payload["warnings"][0]["kind"] == "orphan_score"


def test_leaderboards_table(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["leaderboards", str(snapshot_file)])

    assert result.exit_code == 0, result.output
    assert "Contributors" in result.output
    assert "Ada" in result.output
    assert "Reviewers: no data for these filters" in result.output


def test_leaderboards_with_reputation_and_csv(cli_runner, snapshot_file, tmp_path: Path):
    reputation = tmp_path / "reputation.json"
    reputation.write_text(json.dumps({"author": 0.5}), encoding="utf-8")
    csv_path = tmp_path / "board.csv"

    result = cli_runner.invoke(
        app,
        ["leaderboards", str(snapshot_file), "--reputation", str(reputation), "--csv", str(csv_path)],
    )

    assert result.exit_code == 0, result.output
    contributors_csv = tmp_path / "board_contributors.csv"
    assert f"CSV report written to {contributors_csv}" in result.output
    with contributors_csv.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert float(rows[0]["reputation_multiplier"]) == 1.5
    # No reviewer qualifies, so no reviewer file is written
    assert not (tmp_path / "board_reviewers.csv").exists()


def test_config_file_overrides_coefficients(cli_runner, snapshot_file, tmp_path: Path):
    config = tmp_path / "scoring.yaml"
    config.write_text("contributor:\n  affiliationBonusPoints: 0\n", encoding="utf-8")

    result = cli_runner.invoke(app, ["leaderboards", str(snapshot_file), "-c", str(config), "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["contributor_leaderboard"][0]["affiliation_bonus"] == 0.0


def test_invalid_config_exits_with_error(cli_runner, snapshot_file, tmp_path: Path):
    config = tmp_path / "scoring.yaml"
    config.write_text("contributor:\n  qualityWeight: -1\n", encoding="utf-8")

    result = cli_runner.invoke(app, ["leaderboards", str(snapshot_file), "--config", str(config)])

    assert result.exit_code == 1
    assert "qualityWeight" in result.output or "quality_weight" in result.output


def test_missing_snapshot_exits_with_error(cli_runner, tmp_path: Path):
    result = cli_runner.invoke(app, ["leaderboards", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "Snapshot file not found" in result.output


def test_user_scores_json(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["user-scores", str(snapshot_file), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [entry["user_id"] for entry in payload["scores"]][0] == "author"
    assert payload["stats"]["total_users"] == 4


def test_user_scores_summary_and_html(cli_runner, snapshot_file, tmp_path: Path):
    html_path = tmp_path / "users.html"

    result = cli_runner.invoke(
        app, ["user-scores", str(snapshot_file), "--summary", "--html", str(html_path), "--limit", "2"]
    )

    assert result.exit_code == 0, result.output
    assert "Summary (user_scores)" in result.output
    assert html_path.exists()


def test_curated_filters_and_coverage(cli_runner, snapshot_file):
    result = cli_runner.invoke(
        app,
        ["curated", str(snapshot_file), "--min-coverage", "100", "--as-of", "2025-06-01T00:00:00Z", "--json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [entry["model_id"] for entry in payload["leaderboard"]] == ["model-a"]
    assert payload["stats"]["total_distinct_prompts"] == 2


def test_curated_tag_and_age_options(cli_runner, snapshot_file):
    result = cli_runner.invoke(
        app,
        [
            "curated",
            str(snapshot_file),
            "--tag",
            "math",
            "--max-prompt-age-days",
            "60",
            "--as-of",
            "2025-06-01",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["stats"]["total_distinct_prompts"] == 1
    assert [entry["model_id"] for entry in payload["leaderboard"]] == ["model-b", "model-a"]


def test_curated_filter_file_is_overridden_by_options(cli_runner, snapshot_file, tmp_path: Path):
    filters = tmp_path / "filters.yaml"
    filters.write_text("modelSlugs: model-a\nminCoverage: 10\n", encoding="utf-8")

    result = cli_runner.invoke(
        app, ["curated", str(snapshot_file), "--filters", str(filters), "--min-coverage", "100", "--json"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [entry["model_id"] for entry in payload["leaderboard"]] == ["model-a"]


def test_curated_rejects_invalid_coverage(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["curated", str(snapshot_file), "--min-coverage", "150"])

    assert result.exit_code == 1
    assert "min_coverage" in result.output or "minCoverage" in result.output


def test_curated_rejects_invalid_reference_time(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["curated", str(snapshot_file), "--as-of", "last tuesday"])

    assert result.exit_code == 1


def test_curated_table_prints_counts(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["curated", str(snapshot_file), "--prompt-age-weighting", "linear"])

    assert result.exit_code == 0, result.output
    assert "2 prompt(s), 0 response(s), 3 score(s)" in result.output


def test_stats_command(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["stats", str(snapshot_file)])

    assert result.exit_code == 0, result.output
    assert "Leaderboard data statistics" in result.output
    assert "User score statistics" in result.output


def test_stats_json(cli_runner, snapshot_file):
    result = cli_runner.invoke(app, ["stats", str(snapshot_file), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["leaderboard_stats"]["total_feedbacks"] == 4
    assert payload["leaderboard_stats"]["prompts_with_3_plus_reviews"] == 1
    assert payload["user_score_stats"]["total_users"] == 4
