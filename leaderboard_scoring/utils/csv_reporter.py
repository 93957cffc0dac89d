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

"""Utilities for exporting leaderboards to CSV reports."""

# ------------------------------------------------------------------------------------------------
# Imports
# ------------------------------------------------------------------------------------------------

from __future__ import annotations
import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

DEFAULT_RESULTS_DIR = Path("Results")
DEFAULT_REPORTS_SUBDIR = "Reports"
DEFAULT_PROJECT_NAME = "Leaderboard-Scoring"

LOGGER = logging.getLogger(__name__)

# Column order per leaderboard; nested component columns follow in insertion order
DEFAULT_HEADERS: Dict[str, Sequence[str]] = {
    "contributors": (
        "rank",
        "user_id",
        "display_name",
        "total_score",
        "quality_score",
        "affiliation_bonus",
        "prompt_count",
        "avg_prompt_quality",
        "reputation_multiplier",
    ),
    "reviewers": (
        "rank",
        "user_id",
        "display_name",
        "pearson_correlation",
        "review_count",
        "label",
    ),
    "user_scores": (
        "rank",
        "user_id",
        "display_name",
        "total_score",
        "prompts_created",
        "feedbacks_given",
        "benchmarks_owned",
    ),
    "models": (
        "rank",
        "model_id",
        "avg_score",
        "total_scores",
        "unique_prompts",
        "coverage",
        "avg_response_time",
    ),
}


def flatten_row(payload: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into ``parent.child`` columns."""

    flat: Dict[str, Any] = {}
    for key, value in payload.items():
        column = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_row(value, prefix=f"{column}."))
        else:
            flat[column] = value
    return flat


def _entry_rows(entries: Iterable[Any]) -> List[Dict[str, Any]]:
    rows = []
    for rank, entry in enumerate(entries, 1):
        payload = entry.as_dict() if hasattr(entry, "as_dict") else dict(entry)
        rows.append({"rank": rank, **flatten_row(payload)})
    return rows


def _resolve_headers(rows: Sequence[Mapping[str, Any]], headers: Sequence[str]) -> List[str]:
    resolved = list(headers)
    for row in rows:
        for column in row:
            if column not in resolved:
                resolved.append(column)
    return resolved


def _write_csv(
    path: Path,
    headers: Sequence[str],
    rows: Iterable[Mapping[str, Any]],
) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def generate_csv_report(
    entries: Sequence[Any],
    kind: str,
    *,
    results_dir: Path | str = DEFAULT_RESULTS_DIR,
    output_path: Optional[Path | str] = None,
    headers: Optional[Sequence[str]] = None,
    project_name: str = DEFAULT_PROJECT_NAME,
) -> Path:
    """Generate a CSV report of a ranked leaderboard.

    Args:
        entries: Ranked leaderboard entries (objects with ``as_dict`` or mappings).
        kind: Leaderboard kind, one of :data:`DEFAULT_HEADERS` keys; used for
            the default column order and the default filename.
        results_dir: Base directory for reports.
        output_path: Explicit output location. When omitted a timestamped file
            is created inside ``results_dir / Reports``.
        headers: Leading columns. Defaults to the columns of ``kind``; any
            other column found in the rows is appended.
        project_name: Name used in the default filename.

    Returns:
        Path to the generated CSV file.

    Raises:
        ValueError: When ``kind`` is unknown and no headers are given, or when
            there are no entries to export.
    """

    if headers is None:
        if kind not in DEFAULT_HEADERS:
            raise ValueError(
                f"Unknown leaderboard kind '{kind}'. Expected one of {sorted(DEFAULT_HEADERS)}"
            )
        headers = DEFAULT_HEADERS[kind]

    rows = _entry_rows(entries)
    if not rows:
        raise ValueError("No leaderboard entries available for export.")

    results_dir_path = Path(results_dir)
    output_path = Path(output_path) if output_path else None
    if output_path is None:
        reports_directory = results_dir_path / DEFAULT_REPORTS_SUBDIR
        reports_directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        filename = f"{project_name}_{kind}_report_{timestamp}.csv"
        output_path = reports_directory / filename
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    _write_csv(output_path, _resolve_headers(rows, headers), rows)
    LOGGER.info("CSV report generated at %s", output_path)
    return output_path


__all__ = ["generate_csv_report", "flatten_row", "DEFAULT_HEADERS"]
