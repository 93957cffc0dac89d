"""Shared snapshot fixtures."""

from __future__ import annotations

import pytest

from builders import feedback, opinions, prompt, score, snapshot, user


@pytest.fixture
def contributor_snapshot():
    """One author with a 3/4 positive prompt and a prompt below the review threshold."""

    return snapshot(
        users=[user("author"), *(user(f"r{i}") for i in range(1, 5))],
        prompts=[prompt("p1", "author"), prompt("p2", "author")],
        feedbacks=[
            *opinions(["r1", "r2", "r3", "r4"], "p1", "+++-"),
            *opinions(["r1", "r2"], "p2", "++"),
        ],
    )


@pytest.fixture
def reviewer_snapshot():
    """
    Reviewer 'rev' rates five prompts [+, +, -, +, -] while the two other raters
    agree with each other on [+, +, -, -, +].
    """

    prompt_ids = [f"p{i}" for i in range(1, 6)]
    reviewer_opinions = "++-+-"
    consensus_opinions = "++--+"

    feedbacks = []
    for prompt_id, own, others in zip(prompt_ids, reviewer_opinions, consensus_opinions):
        feedbacks.extend(opinions(["rev", "o1", "o2"], prompt_id, own + others + others))

    return snapshot(
        users=[user("author"), user("rev"), user("o1"), user("o2")],
        prompts=[prompt(prompt_id, "author") for prompt_id in prompt_ids],
        feedbacks=feedbacks,
    )


@pytest.fixture
def coverage_snapshot():
    """Ten prompts: model A scored on all of them, model B on the first four."""

    prompts = [prompt(f"p{i}") for i in range(10)]
    scores = [score(f"p{i}", "model-a", 0.8) for i in range(10)]
    scores += [score(f"p{i}", "model-b", 0.9) for i in range(4)]
    return snapshot(users=[user("author")], prompts=prompts, scores=scores)


@pytest.fixture
def sample_snapshot(contributor_snapshot, reviewer_snapshot):
    """Contributor and reviewer data merged, plus a few scores."""

    return snapshot(
        users=[*contributor_snapshot.users, *reviewer_snapshot.users[1:]],
        prompts=[
            *contributor_snapshot.prompts,
            *(prompt(f"q{item.id}", item.author_id) for item in reviewer_snapshot.prompts),
        ],
        feedbacks=[
            *contributor_snapshot.feedbacks,
            *(feedback(item.reviewer_id, f"q{item.target_prompt_id}", item.opinion) for item in reviewer_snapshot.feedbacks),
        ],
        scores=[score("p1", "model-a", 0.4), score("p2", "model-a", 0.6), score("p1", "model-b", 1.0)],
    )
