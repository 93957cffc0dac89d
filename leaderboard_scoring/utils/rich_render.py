"""Helpers for rendering rich output within the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

from rich.console import Console
from rich.table import Table

from ..core.exceptions import DataIntegrityWarning

_CONSOLE: Console | None = None


@dataclass(slots=True)
class ColorPalette:
    """Color tokens used by the leaderboard tables."""

    table_border: str = "cyan"
    table_header: str = "bold cyan"
    row_alt: str = "dim"
    warning: str = "yellow"


@dataclass(slots=True)
class RenderOptions:
    """Options influencing how rich helpers behave."""

    color_system: str | None = None
    palette: ColorPalette = field(default_factory=ColorPalette)


def get_console(options: RenderOptions | None = None) -> Console:
    """Return a shared Rich console instance configured for plain output."""

    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(
            soft_wrap=True,
            color_system=options.color_system if options else None,
            markup=False,
            highlight=False,
        )
    return _CONSOLE


def style_table(table: Table, *, options: RenderOptions | None = None) -> None:
    """Apply accessibility-aware styling to Rich tables."""

    palette = options.palette if options else ColorPalette()
    table.border_style = palette.table_border
    table.header_style = palette.table_header
    table.row_styles = ["", palette.row_alt]


def _number(value: Any, digits: int = 4) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


Column = Tuple[str, Callable[[Any], str]]

LEADERBOARD_COLUMNS: Dict[str, List[Column]] = {
    "contributors": [
        ("User", lambda entry: entry.display_name),
        ("Total", lambda entry: _number(entry.total_score)),
        ("Avg quality", lambda entry: _number(entry.avg_prompt_quality)),
        ("Prompts", lambda entry: str(entry.prompt_count)),
        ("Affiliation", lambda entry: _number(entry.affiliation_bonus, 1)),
        ("Reputation", lambda entry: _number(entry.reputation_multiplier, 2)),
    ],
    "reviewers": [
        ("User", lambda entry: entry.display_name),
        ("Pearson r", lambda entry: _number(entry.pearson_correlation)),
        ("Reviews", lambda entry: str(entry.review_count)),
        ("Label", lambda entry: entry.label),
    ],
    "user_scores": [
        ("User", lambda entry: entry.display_name),
        ("Total", lambda entry: _number(entry.total_score, 1)),
        ("Bonuses", lambda entry: _number(entry.components.total_bonuses, 1)),
        ("Continuous", lambda entry: _number(entry.components.total_continuous, 1)),
        ("h-index", lambda entry: str(entry.components.continuous.h_index)),
        ("Prompts", lambda entry: str(entry.prompts_created)),
        ("Feedbacks", lambda entry: str(entry.feedbacks_given)),
    ],
    "models": [
        ("Model", lambda entry: entry.model_id),
        ("Avg score", lambda entry: _number(entry.avg_score)),
        ("Scores", lambda entry: str(entry.total_scores)),
        ("Prompts", lambda entry: str(entry.unique_prompts)),
        ("Coverage %", lambda entry: _number(entry.coverage, 1)),
        ("Avg time (s)", lambda entry: _number(entry.avg_response_time, 2)),
    ],
}


def build_leaderboard_table(
    entries: Sequence[Any],
    kind: str,
    *,
    title: str | None = None,
    limit: int | None = None,
    options: RenderOptions | None = None,
) -> Table:
    """Build a rich table for a ranked leaderboard of the given kind."""

    if kind not in LEADERBOARD_COLUMNS:
        raise ValueError(f"Unknown leaderboard kind '{kind}'. Expected one of {sorted(LEADERBOARD_COLUMNS)}")

    columns = LEADERBOARD_COLUMNS[kind]
    table = Table(title=title)
    table.add_column("#", justify="right")
    for header, _ in columns:
        table.add_column(header)

    shown = entries if limit is None else entries[:limit]
    for rank, entry in enumerate(shown, 1):
        table.add_row(str(rank), *(render(entry) for _, render in columns))

    style_table(table, options=options)
    return table


def render_leaderboard(
    entries: Sequence[Any],
    kind: str,
    *,
    title: str | None = None,
    limit: int | None = None,
    options: RenderOptions | None = None,
) -> None:
    """Print a leaderboard table, or a 'no data' line when it is empty."""

    console = get_console(options)
    if not entries:
        console.print(f"{title or kind}: no data for these filters")
        return
    console.print(build_leaderboard_table(entries, kind, title=title, limit=limit, options=options))


def render_warnings(
    warnings: Sequence[DataIntegrityWarning],
    *,
    options: RenderOptions | None = None,
) -> None:
    """Print a count of data integrity warnings per kind."""

    if not warnings:
        return
    palette = options.palette if options else ColorPalette()
    counts: Dict[str, int] = {}
    for warning in warnings:
        counts[warning.kind] = counts.get(warning.kind, 0) + 1
    summary = ", ".join(f"{kind}: {count}" for kind, count in sorted(counts.items()))
    get_console(options).print(
        f"{len(warnings)} data integrity warning(s) ({summary})", style=palette.warning
    )


__all__ = [
    "ColorPalette",
    "RenderOptions",
    "LEADERBOARD_COLUMNS",
    "get_console",
    "style_table",
    "build_leaderboard_table",
    "render_leaderboard",
    "render_warnings",
]
