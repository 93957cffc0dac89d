"""Record builders shared by the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Iterable, Optional, Sequence

from leaderboard_scoring.core.types import (
    Benchmark,
    Collaboration,
    Feedback,
    Prompt,
    Response,
    Score,
    Snapshot,
    User,
)

AS_OF = datetime(2025, 6, 1, tzinfo=timezone.utc)

_ids = count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def user(user_id: str, *, affiliated: bool = False, name: str = "") -> User:
    return User(id=user_id, display_name=name, has_affiliation=affiliated)


def prompt(
    prompt_id: str,
    author_id: str = "author",
    *,
    age_days: Optional[float] = None,
    prompt_set_id: Optional[str] = None,
    **kwargs,
) -> Prompt:
    created_at = AS_OF - timedelta(days=age_days) if age_days is not None else None
    return Prompt(
        id=prompt_id,
        author_id=author_id,
        created_at=created_at,
        prompt_set_id=prompt_set_id,
        **kwargs,
    )


def feedback(
    reviewer_id: str,
    prompt_id: str,
    opinion: str = "positive",
    *,
    feedback_id: Optional[str] = None,
    response_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Feedback:
    return Feedback(
        id=feedback_id or _next_id("fb"),
        reviewer_id=reviewer_id,
        target_prompt_id=prompt_id,
        opinion=opinion,
        target_response_id=response_id,
        created_at=created_at,
    )


def opinions(reviewer_ids: Iterable[str], prompt_id: str, values: str) -> list:
    """One feedback per reviewer; ``values`` is a string of '+' and '-'."""
    return [
        feedback(reviewer_id, prompt_id, "positive" if value == "+" else "negative")
        for reviewer_id, value in zip(reviewer_ids, values)
    ]


def score(
    prompt_id: str,
    model_id: str,
    value: Optional[float],
    *,
    score_id: Optional[str] = None,
    response_id: Optional[str] = None,
) -> Score:
    return Score(
        id=score_id or _next_id("sc"),
        prompt_id=prompt_id,
        model_id=model_id,
        value=value,
        response_id=response_id,
    )


def response(
    response_id: str,
    prompt_id: str,
    model_id: str,
    *,
    latency: Optional[float] = None,
    started_at: datetime = AS_OF,
) -> Response:
    finished_at = started_at + timedelta(seconds=latency) if latency is not None else None
    return Response(
        id=response_id,
        prompt_id=prompt_id,
        model_id=model_id,
        started_at=started_at,
        finished_at=finished_at,
    )


def benchmark(benchmark_id: str, owner_id: str, *, title: str = "", contributors: Sequence[str] = ()) -> Benchmark:
    return Benchmark(id=benchmark_id, owner_id=owner_id, title=title, contributor_ids=tuple(contributors))


def collaboration(user_id: str, prompt_set_id: str, role: str = "collaborator") -> Collaboration:
    return Collaboration(user_id=user_id, prompt_set_id=prompt_set_id, role=role)


def snapshot(**sections) -> Snapshot:
    return Snapshot(**sections)
