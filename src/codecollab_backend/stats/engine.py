"""Aggregation passes over denormalised member responses.

Everything here is pure: callers hand in already-loaded questions and
responses, and get pydantic models back. Nothing touches the database.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from codecollab_backend.shared import Difficulty, ResponseStatus, round_half_up
from codecollab_backend.stats.models import MemberStats, QuestionStats

STREAK_WINDOW = 20

_DIFFICULTY_SCORES: dict[str, int] = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


class ResponseRecord(Protocol):
    """Shape of a member response consumed by the engine."""

    user_id: UUID
    status: ResponseStatus
    difficulty_rating: Difficulty
    time_to_solve: int | None


class QuestionRecord(Protocol):
    """Shape of a question consumed by the engine."""

    created_at: datetime

    @property
    def member_responses(self) -> Sequence[ResponseRecord]: ...


class RankedEntry(Protocol):
    stats: MemberStats


RankedT = TypeVar("RankedT", bound=RankedEntry)


def difficulty_score(rating: str | None) -> int:
    """Map a difficulty label to 1-3; unknown labels count as medium."""
    return _DIFFICULTY_SCORES.get(rating or "", 2)


def member_difficulty_rating(responses: Sequence[ResponseRecord]) -> Difficulty | None:
    """Return the consensus difficulty members reported, or ``None`` without votes."""
    if not responses:
        return None
    average = sum(difficulty_score(r.difficulty_rating) for r in responses) / len(
        responses
    )
    if average <= 1.5:
        return Difficulty.EASY
    if average <= 2.5:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def average_time_to_solve(responses: Iterable[ResponseRecord]) -> int | None:
    """Mean minutes over solved responses that carry a time; ``None`` if none do."""
    timings = [
        r.time_to_solve
        for r in responses
        if r.status == ResponseStatus.SOLVED and r.time_to_solve
    ]
    if not timings:
        return None
    return round_half_up(sum(timings) / len(timings))


def question_stats(responses: Sequence[ResponseRecord]) -> QuestionStats:
    """Summarise every response logged against one question."""
    by_status = Counter(r.status for r in responses)
    distribution = Counter(str(r.difficulty_rating) for r in responses)
    return QuestionStats(
        solved_count=by_status[ResponseStatus.SOLVED],
        attempted_count=by_status[ResponseStatus.ATTEMPTED],
        stuck_count=by_status[ResponseStatus.STUCK],
        total_responses=len(responses),
        average_time_to_solve=average_time_to_solve(responses),
        member_difficulty_rating=member_difficulty_rating(responses),
        difficulty_distribution=dict(distribution),
    )


def _response_of(question: QuestionRecord, user_id: UUID) -> ResponseRecord | None:
    return next((r for r in question.member_responses if r.user_id == user_id), None)


def current_streak(
    user_id: UUID,
    questions: Iterable[QuestionRecord],
    *,
    window: int = STREAK_WINDOW,
) -> int:
    """Count consecutive solves over the member's most recent answered questions.

    Questions are ordered newest first by creation time, only those the member
    answered are considered, and at most *window* of them are inspected.
    """
    answered = sorted(
        (q for q in questions if _response_of(q, user_id) is not None),
        key=lambda q: q.created_at,
        reverse=True,
    )[:window]
    streak = 0
    for question in answered:
        response = _response_of(question, user_id)
        if response is None or response.status != ResponseStatus.SOLVED:
            break
        streak += 1
    return streak


def member_stats(
    user_id: UUID,
    questions: Sequence[QuestionRecord],
    *,
    total_questions: int | None = None,
) -> MemberStats:
    """Compute *user_id*'s record over a group's active *questions*."""
    responses = [
        response
        for response in (_response_of(q, user_id) for q in questions)
        if response is not None
    ]
    solved = sum(1 for r in responses if r.status == ResponseStatus.SOLVED)
    total_responses = len(responses)
    success_rate = (
        round_half_up(solved / total_responses * 100) if total_responses else 0
    )
    return MemberStats(
        problems_solved=solved,
        success_rate=success_rate,
        current_streak=current_streak(user_id, questions),
        total_responses=total_responses,
        total_questions=len(questions) if total_questions is None else total_questions,
        average_time_to_solve=average_time_to_solve(responses),
        questions_attempted=total_responses,
    )


def assign_ranks(entries: Sequence[RankedT]) -> Sequence[RankedT]:
    """Rank entries by problems solved, best first; ties keep their input order.

    Ranks are written onto each entry's stats; *entries* keeps its order.
    """
    ordered = sorted(entries, key=lambda entry: entry.stats.problems_solved, reverse=True)
    for position, entry in enumerate(ordered, start=1):
        entry.stats.rank = position
    return entries
