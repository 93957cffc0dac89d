"""Summary and HTML reporting utilities for leaderboards."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd
from jinja2 import Environment

from .csv_reporter import DEFAULT_REPORTS_SUBDIR, DEFAULT_RESULTS_DIR, flatten_row

DEFAULT_REPORT_TITLE = "Leaderboard Scoring - Summary Report"

# Column holding the ranking value and the column naming the ranked subject, per leaderboard
SCORE_COLUMNS: Dict[str, tuple] = {
    "contributors": ("total_score", "display_name"),
    "reviewers": ("pearson_correlation", "display_name"),
    "user_scores": ("total_score", "display_name"),
    "models": ("avg_score", "model_id"),
}

_HTML_TEMPLATE = (
    "<html><head><title>{{ report_title }}</title></head><body>"
    "<h1>{{ report_title }}</h1>"
    "<p>Generated at {{ summary_data.generated_at }}</p>"
    "<ul>"
    "<li>Entries: {{ summary_data.entry_count }}</li>"
    "<li>Top entry: {{ summary_data.top_entry }}</li>"
    "<li>Mean score: {{ '%.4f' | format(summary_data.mean_score) }}</li>"
    "<li>Median score: {{ '%.4f' | format(summary_data.median_score) }}</li>"
    "</ul>"
    "{{ table_html | safe }}"
    "</body></html>"
)


@dataclass(slots=True)
class SummaryData:
    """Key summary values of one leaderboard."""

    kind: str = ""
    top_entry: str = "N/A"
    entry_count: int = 0
    mean_score: float = 0.0
    median_score: float = 0.0
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def build_dataframe(entries: Sequence[Any]) -> pd.DataFrame:
    """Load ranked entries into a DataFrame with a 1-based ``rank`` column and flattened components."""

    records = []
    for rank, entry in enumerate(entries, 1):
        payload = entry.as_dict() if hasattr(entry, "as_dict") else dict(entry)
        records.append({"rank": rank, **flatten_row(payload)})
    return pd.DataFrame.from_records(records)


def build_summary(dataframe: pd.DataFrame, kind: str) -> SummaryData:
    """Build summary values for a leaderboard DataFrame."""

    if kind not in SCORE_COLUMNS:
        raise ValueError(f"Unknown leaderboard kind '{kind}'. Expected one of {sorted(SCORE_COLUMNS)}")

    summary = SummaryData(kind=kind, entry_count=len(dataframe.index))
    score_column, name_column = SCORE_COLUMNS[kind]
    if dataframe.empty or score_column not in dataframe.columns:
        return summary

    scores = dataframe[score_column].astype(float)
    top_row = dataframe.loc[scores.idxmax()]
    summary.top_entry = f"{top_row.get(name_column, 'unknown')} (Score: {float(top_row[score_column]):.2f})"
    summary.mean_score = float(scores.mean())
    summary.median_score = float(scores.median())
    return summary


def format_summary(summary: SummaryData) -> str:
    """Render summary values as a plain text block."""

    return "\n".join([
        f"Summary ({summary.kind})",
        "-" * 40,
        f"Entries:      {summary.entry_count}",
        f"Top entry:    {summary.top_entry}",
        f"Mean score:   {summary.mean_score:.4f}",
        f"Median score: {summary.median_score:.4f}",
    ])


def render_html_report(
    dataframe: pd.DataFrame,
    summary: SummaryData,
    *,
    output_path: Path,
) -> Path:
    """Render the leaderboard and its summary to an HTML file."""

    env = Environment(autoescape=True)
    template = env.from_string(_HTML_TEMPLATE)
    context: Dict[str, object] = {
        "report_title": DEFAULT_REPORT_TITLE,
        "summary_data": asdict(summary),
        "table_html": dataframe.to_html(index=False, classes="results-table"),
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(template.render(context), encoding="utf-8")
    return output_path


def generate_html_report(
    entries: Sequence[Any],
    kind: str,
    *,
    results_dir: Path | str = DEFAULT_RESULTS_DIR,
    output_path: Optional[Path | str] = None,
) -> Path:
    """Generate an HTML summary report of a ranked leaderboard.

    When ``output_path`` is omitted the report is written to
    ``results_dir / Reports / <kind>_summary_report.html``.
    """

    dataframe = build_dataframe(entries)
    summary = build_summary(dataframe, kind)
    destination = (
        Path(output_path)
        if output_path is not None
        else Path(results_dir) / DEFAULT_REPORTS_SUBDIR / f"{kind}_summary_report.html"
    )
    return render_html_report(dataframe, summary, output_path=destination)


__all__ = [
    "SummaryData",
    "SCORE_COLUMNS",
    "build_dataframe",
    "build_summary",
    "format_summary",
    "render_html_report",
    "generate_html_report",
]
