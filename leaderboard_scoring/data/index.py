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

"""
Grouped, reference-checked view over an input snapshot.

The index is built once per computation and shared by every scorer. While
grouping records it drops anything the engine must not use and records a
``DataIntegrityWarning`` for each dropped or degraded record:

- feedback pointing at a missing prompt or response, or with an unknown opinion
- a second feedback from the same reviewer on the same target
- scores pointing at a missing prompt, or with a value outside [0, 1]
- scores pointing at a missing response (kept, without latency)
- responses pointing at a missing prompt, or finishing before they start

Feedback left by a prompt's author on their own prompt is excluded silently:
it is valid data, it just never counts.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple, Union

from ..core.constants import OPINION_VALUES, SCORE_BOUNDS
from ..core.exceptions import DataIntegrityWarning
from ..core.types import (
    Benchmark,
    Collaboration,
    Feedback,
    Prompt,
    Response,
    Score,
    Snapshot,
    User,
)

logger = logging.getLogger(__name__)

Target = Tuple[str, Optional[str]]


class SnapshotIndex:
    """Lookup tables over one immutable snapshot, plus the warnings found building them."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot
        self.warnings: List[DataIntegrityWarning] = []

        self.users_by_id: Dict[str, User] = {user.id: user for user in snapshot.users}
        self.prompts_by_id: Dict[str, Prompt] = {prompt.id: prompt for prompt in snapshot.prompts}
        self.benchmarks_by_id: Dict[str, Benchmark] = {item.id: item for item in snapshot.benchmarks}

        self.prompts_by_author: Dict[str, List[Prompt]] = defaultdict(list)
        for prompt in snapshot.prompts:
            self.prompts_by_author[prompt.author_id].append(prompt)

        self._index_responses()
        self._index_feedbacks()
        self._index_scores()
        self._index_benchmarks()

        self.collaborations_by_user: Dict[str, List[Collaboration]] = defaultdict(list)
        for collaboration in snapshot.collaborations:
            self.collaborations_by_user[collaboration.user_id].append(collaboration)

        if self.warnings:
            logger.info(f"Snapshot indexed with {len(self.warnings)} data integrity warning(s)")

    # --------------------------------------------------------------------------------------------
    # Building
    # --------------------------------------------------------------------------------------------

    def _warn(self, kind: str, record_id: str, message: str, reference_id: Optional[str] = None) -> None:
        warning = DataIntegrityWarning(kind, record_id, message, reference_id)
        self.warnings.append(warning)
        logger.warning(message)

    def _index_responses(self) -> None:
        self.responses_by_id: Dict[str, Response] = {}
        self.latency_by_response: Dict[str, Optional[float]] = {}
        self.responses_by_prompt: Dict[str, List[Response]] = defaultdict(list)

        for response in self.snapshot.responses:
            if response.prompt_id not in self.prompts_by_id:
                self._warn(
                    "orphan_response",
                    response.id,
                    f"Response '{response.id}' references missing prompt '{response.prompt_id}', skipping",
                    response.prompt_id,
                )
                continue

            latency = response.latency_seconds
            if latency is not None and latency < 0:
                self._warn(
                    "invalid_response_timing",
                    response.id,
                    f"Response '{response.id}' finishes before it starts, ignoring its latency",
                )
                latency = None

            self.responses_by_id[response.id] = response
            self.latency_by_response[response.id] = latency
            self.responses_by_prompt[response.prompt_id].append(response)

    def _index_feedbacks(self) -> None:
        self.feedbacks: List[Feedback] = []
        self.feedbacks_by_target: Dict[Target, List[Feedback]] = defaultdict(list)
        self.feedbacks_by_prompt: Dict[str, List[Feedback]] = defaultdict(list)
        self.feedbacks_by_reviewer: Dict[str, List[Feedback]] = defaultdict(list)
        self.self_feedback_count = 0

        seen: Set[Tuple[str, Target]] = set()
        for feedback in self.snapshot.feedbacks:
            if feedback.opinion not in OPINION_VALUES:
                self._warn(
                    "invalid_feedback",
                    feedback.id,
                    f"Feedback '{feedback.id}' has unknown opinion '{feedback.opinion}', skipping",
                )
                continue

            prompt = self.prompts_by_id.get(feedback.target_prompt_id)
            if prompt is None:
                self._warn(
                    "orphan_feedback",
                    feedback.id,
                    f"Feedback '{feedback.id}' references missing prompt '{feedback.target_prompt_id}', skipping",
                    feedback.target_prompt_id,
                )
                continue

            if feedback.target_response_id is not None and feedback.target_response_id not in self.responses_by_id:
                self._warn(
                    "orphan_feedback",
                    feedback.id,
                    f"Feedback '{feedback.id}' references missing response '{feedback.target_response_id}', skipping",
                    feedback.target_response_id,
                )
                continue

            if (
                feedback.target_response_id is not None
                and self.responses_by_id[feedback.target_response_id].prompt_id != prompt.id
            ):
                self._warn(
                    "mismatched_feedback",
                    feedback.id,
                    f"Feedback '{feedback.id}' targets response '{feedback.target_response_id}' "
                    f"of another prompt than '{prompt.id}', skipping",
                    feedback.target_response_id,
                )
                continue

            if feedback.reviewer_id == prompt.author_id:
                self.self_feedback_count += 1
                logger.debug(f"Excluding self-feedback '{feedback.id}' on prompt '{prompt.id}'")
                continue

            key = (feedback.reviewer_id, feedback.target)
            if key in seen:
                self._warn(
                    "duplicate_feedback",
                    feedback.id,
                    f"Reviewer '{feedback.reviewer_id}' already reviewed target {feedback.target}, "
                    f"skipping feedback '{feedback.id}'",
                    feedback.target_prompt_id,
                )
                continue
            seen.add(key)

            self.feedbacks.append(feedback)
            self.feedbacks_by_target[feedback.target].append(feedback)
            self.feedbacks_by_reviewer[feedback.reviewer_id].append(feedback)
            if feedback.target_response_id is None:
                self.feedbacks_by_prompt[feedback.target_prompt_id].append(feedback)

    def _index_scores(self) -> None:
        self.scores: List[Score] = []
        self.scores_by_prompt: Dict[str, List[Score]] = defaultdict(list)
        self.missing_score_count = 0

        for score in self.snapshot.scores:
            if score.prompt_id not in self.prompts_by_id:
                self._warn(
                    "orphan_score",
                    score.id,
                    f"Score '{score.id}' references missing prompt '{score.prompt_id}', skipping",
                    score.prompt_id,
                )
                continue

            if score.value is None:
                self.missing_score_count += 1
                continue

            if (
                isinstance(score.value, bool)
                or not isinstance(score.value, (int, float))
                or not math.isfinite(score.value)
                or not SCORE_BOUNDS["MIN"] <= score.value <= SCORE_BOUNDS["MAX"]
            ):
                self._warn(
                    "invalid_score",
                    score.id,
                    f"Score '{score.id}' has value {score.value!r} outside "
                    f"[{SCORE_BOUNDS['MIN']}, {SCORE_BOUNDS['MAX']}], skipping",
                )
                continue

            if score.response_id is not None and score.response_id not in self.responses_by_id:
                self._warn(
                    "missing_response",
                    score.id,
                    f"Score '{score.id}' references missing response '{score.response_id}', "
                    "keeping it without latency",
                    score.response_id,
                )
            elif (
                score.response_id is not None
                and self.responses_by_id[score.response_id].prompt_id != score.prompt_id
            ):
                self._warn(
                    "mismatched_response",
                    score.id,
                    f"Score '{score.id}' references response '{score.response_id}' of another prompt, "
                    "keeping it without latency",
                    score.response_id,
                )

            self.scores.append(score)
            self.scores_by_prompt[score.prompt_id].append(score)

        if self.missing_score_count:
            logger.debug(f"Ignoring {self.missing_score_count} score(s) without a value")

    def _index_benchmarks(self) -> None:
        authors_by_set: Dict[str, Set[str]] = defaultdict(set)
        for prompt in self.snapshot.prompts:
            if prompt.prompt_set_id is not None:
                authors_by_set[prompt.prompt_set_id].add(prompt.author_id)

        self.contributors_by_benchmark: Dict[str, Set[str]] = {}
        self.benchmarks_by_owner: Dict[str, List[Benchmark]] = defaultdict(list)
        for benchmark in self.snapshot.benchmarks:
            contributors = set(benchmark.contributor_ids) | authors_by_set.get(benchmark.id, set())
            self.contributors_by_benchmark[benchmark.id] = contributors
            self.benchmarks_by_owner[benchmark.owner_id].append(benchmark)

    # --------------------------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------------------------

    def latency_for(self, score: Score) -> Optional[float]:
        response = self.responses_by_id.get(score.response_id) if score.response_id is not None else None
        if response is None or response.prompt_id != score.prompt_id:
            return None
        return self.latency_by_response[response.id]

    def display_name(self, user_id: str) -> str:
        user = self.users_by_id.get(user_id)
        if user is None or not user.display_name:
            return user_id
        return user.display_name


def as_index(data: Union[Snapshot, SnapshotIndex]) -> SnapshotIndex:
    """Return ``data`` as a ``SnapshotIndex``, building one from a ``Snapshot`` if needed."""
    if isinstance(data, SnapshotIndex):
        return data
    if isinstance(data, Snapshot):
        return SnapshotIndex(data)
    raise TypeError(f"Expected a Snapshot or SnapshotIndex, got {type(data).__name__}")


__all__ = ["SnapshotIndex", "as_index"]
