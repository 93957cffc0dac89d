"""Command-line entry point for the leaderboard scoring engine."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import typer

from .core.config import load_config_file, load_scoring_config
from .core.exceptions import ConfigurationError, SnapshotError
from .data.index import SnapshotIndex
from .data.loaders import load_snapshot
from .data.validators import parse_timestamp, to_snake_case
from .run_scoring import (
    calculate_curated_leaderboard,
    calculate_leaderboards,
    calculate_user_score_results,
    export_results_as_json,
)
from .scoring.stats import (
    calculate_leaderboard_stats,
    calculate_user_score_stats,
    format_stats_for_console,
    format_user_score_stats,
)
from .scoring.user_scoring import calculate_user_scores
from .utils.csv_reporter import generate_csv_report
from .utils.logging import configure_console_only_logging
from .utils.rich_render import get_console, render_leaderboard, render_warnings
from .utils.summary_reporter import (
    build_dataframe,
    build_summary,
    format_summary,
    generate_html_report,
)


app = typer.Typer(help="Contributor, reviewer, user reputation and curated model leaderboards")

SNAPSHOT_ARGUMENT = typer.Argument(..., help="Snapshot file (.json, .yaml or .yml).")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Scoring configuration file (.yaml or .json).")
JSON_OPTION = typer.Option(False, "--json", help="Print results as JSON instead of tables.")
CSV_OPTION = typer.Option(None, "--csv", help="Write the leaderboard(s) to this CSV file.")
HTML_OPTION = typer.Option(None, "--html", help="Write an HTML summary report to this file.")
SUMMARY_OPTION = typer.Option(False, "--summary", help="Print a summary of the leaderboard(s).")
LIMIT_OPTION = typer.Option(None, "--limit", "-n", help="Show only the first N rows of each table.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log progress and data warnings.")


def _fail(message: str) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _prepare(snapshot_path: Path, config_path: Optional[Path], verbose: bool):
    configure_console_only_logging(logging.INFO if verbose else logging.ERROR)
    try:
        config = load_scoring_config(config_path)
        snapshot = load_snapshot(snapshot_path)
    except (ConfigurationError, SnapshotError) as exc:
        _fail(str(exc))
    return config, snapshot


def _suffixed(path: Path, kind: str, multiple: bool) -> Path:
    if not multiple:
        return path
    return path.with_name(f"{path.stem}_{kind}{path.suffix}")


def _write_reports(
    boards: Dict[str, Sequence[Any]],
    csv_path: Optional[Path],
    html_path: Optional[Path],
    summary: bool,
) -> None:
    multiple = len(boards) > 1
    for kind, entries in boards.items():
        if csv_path is not None and entries:
            written = generate_csv_report(entries, kind, output_path=_suffixed(csv_path, kind, multiple))
            typer.echo(f"CSV report written to {written}")
        if html_path is not None:
            written = generate_html_report(entries, kind, output_path=_suffixed(html_path, kind, multiple))
            typer.echo(f"HTML report written to {written}")
        if summary:
            typer.echo(format_summary(build_summary(build_dataframe(entries), kind)))


def _load_reputation(path: Optional[Path]) -> Optional[Dict[str, float]]:
    if path is None:
        return None
    try:
        return load_config_file(path)
    except ConfigurationError as exc:
        _fail(str(exc))


@app.command()
def leaderboards(
    snapshot_path: Path = SNAPSHOT_ARGUMENT,
    config_path: Optional[Path] = CONFIG_OPTION,
    reputation_path: Optional[Path] = typer.Option(
        None,
        "--reputation",
        help="JSON or YAML mapping of user id to historical reputation signal.",
    ),
    as_json: bool = JSON_OPTION,
    csv_path: Optional[Path] = CSV_OPTION,
    html_path: Optional[Path] = HTML_OPTION,
    summary: bool = SUMMARY_OPTION,
    limit: Optional[int] = LIMIT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Rank contributors and reviewers."""

    config, snapshot = _prepare(snapshot_path, config_path, verbose)
    reputation = _load_reputation(reputation_path)
    try:
        results = calculate_leaderboards(snapshot, config.leaderboard, reputation)
    except ConfigurationError as exc:
        _fail(str(exc))

    if as_json:
        typer.echo(export_results_as_json(results))
    else:
        render_leaderboard(results.contributor_leaderboard, "contributors", title="Contributors", limit=limit)
        render_leaderboard(results.reviewer_leaderboard, "reviewers", title="Reviewers", limit=limit)
        render_warnings(results.warnings)

    _write_reports(
        {"contributors": results.contributor_leaderboard, "reviewers": results.reviewer_leaderboard},
        csv_path,
        html_path,
        summary,
    )


@app.command("user-scores")
def user_scores(
    snapshot_path: Path = SNAPSHOT_ARGUMENT,
    config_path: Optional[Path] = CONFIG_OPTION,
    as_json: bool = JSON_OPTION,
    csv_path: Optional[Path] = CSV_OPTION,
    html_path: Optional[Path] = HTML_OPTION,
    summary: bool = SUMMARY_OPTION,
    limit: Optional[int] = LIMIT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Compute the reputation score of every user."""

    config, snapshot = _prepare(snapshot_path, config_path, verbose)
    results = calculate_user_score_results(snapshot, config.user_score)

    if as_json:
        typer.echo(export_results_as_json(results))
    else:
        render_leaderboard(results.scores, "user_scores", title="User scores", limit=limit)
        render_warnings(results.warnings)

    _write_reports({"user_scores": results.scores}, csv_path, html_path, summary)


@app.command()
def curated(
    snapshot_path: Path = SNAPSHOT_ARGUMENT,
    config_path: Optional[Path] = CONFIG_OPTION,
    filters_path: Optional[Path] = typer.Option(
        None,
        "--filters",
        help="Filter file (.yaml or .json); command-line filters override its values.",
    ),
    tags: List[str] = typer.Option([], "--tag", help="Keep prompts with this tag (repeatable, OR).", show_default=False),
    prompt_types: List[str] = typer.Option([], "--prompt-type", help="Keep prompts of this type (repeatable).", show_default=False),
    prompt_set_ids: List[str] = typer.Option([], "--prompt-set", help="Keep prompts of this prompt set (repeatable).", show_default=False),
    uploader_id: Optional[str] = typer.Option(None, "--uploader", help="Keep prompts uploaded by this user."),
    model_slugs: List[str] = typer.Option(
        [],
        "--model",
        help="Keep prompts scored by every listed model and rank only these models (repeatable).",
        show_default=False,
    ),
    max_prompt_age_days: Optional[float] = typer.Option(None, "--max-prompt-age-days", help="Drop prompts older than this."),
    min_coverage: Optional[float] = typer.Option(None, "--min-coverage", help="Minimum coverage percentage (0-100)."),
    prompt_age_weighting: Optional[str] = typer.Option(
        None, "--prompt-age-weighting", help="none, linear or exponential."
    ),
    response_delay_weighting: Optional[str] = typer.Option(
        None, "--response-delay-weighting", help="none, linear or exponential."
    ),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference time for prompt ages (ISO 8601)."),
    as_json: bool = JSON_OPTION,
    csv_path: Optional[Path] = CSV_OPTION,
    html_path: Optional[Path] = HTML_OPTION,
    summary: bool = SUMMARY_OPTION,
    limit: Optional[int] = LIMIT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Rank AI models over a filtered subset of prompts."""

    config, snapshot = _prepare(snapshot_path, config_path, verbose)

    filters: Dict[str, Any] = {}
    reference_time: Optional[datetime] = None
    try:
        if filters_path is not None:
            # File keys may be camelCase; overrides below are snake_case
            filters.update({to_snake_case(str(key)): value for key, value in load_config_file(filters_path).items()})
        overrides = {
            "tags": tags or None,
            "prompt_types": prompt_types or None,
            "prompt_set_ids": prompt_set_ids or None,
            "uploader_id": uploader_id,
            "model_slugs": model_slugs or None,
            "max_prompt_age_days": max_prompt_age_days,
            "min_coverage": min_coverage,
            "prompt_age_weighting": prompt_age_weighting,
            "response_delay_weighting": response_delay_weighting,
        }
        filters.update({key: value for key, value in overrides.items() if value is not None})
        if as_of is not None:
            reference_time = parse_timestamp(as_of)
        result = calculate_curated_leaderboard(snapshot, filters, config.weighting, reference_time)
    except ValueError as exc:
        # ConfigurationError is a ValueError, as are malformed --as-of values
        _fail(str(exc))

    if as_json:
        typer.echo(export_results_as_json(result))
    else:
        render_leaderboard(result.leaderboard, "models", title="Curated model leaderboard", limit=limit)
        get_console().print(
            f"{result.stats.total_distinct_prompts} prompt(s), {result.stats.total_responses} response(s), "
            f"{result.stats.total_scores} score(s)"
        )
        render_warnings(result.warnings)

    _write_reports({"models": result.leaderboard}, csv_path, html_path, summary)


@app.command()
def stats(
    snapshot_path: Path = SNAPSHOT_ARGUMENT,
    config_path: Optional[Path] = CONFIG_OPTION,
    as_json: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print statistics of the snapshot and of the user scores."""

    config, snapshot = _prepare(snapshot_path, config_path, verbose)
    index = SnapshotIndex(snapshot)
    leaderboard_stats = calculate_leaderboard_stats(index)
    user_score_stats = calculate_user_score_stats(calculate_user_scores(index, config.user_score), index)

    if as_json:
        typer.echo(export_results_as_json({
            "leaderboard_stats": leaderboard_stats,
            "user_score_stats": user_score_stats,
            "warnings": index.warnings,
        }))
        return

    typer.echo(format_stats_for_console(leaderboard_stats))
    typer.echo("")
    typer.echo(format_user_score_stats(user_score_stats))
    render_warnings(index.warnings)


def main() -> None:
    """Entry point compatible with console_scripts."""

    app()


if __name__ == "__main__":
    main()
