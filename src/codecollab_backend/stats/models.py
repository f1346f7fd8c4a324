"""Result models produced by the statistics engine."""

from __future__ import annotations

from pydantic import Field

from codecollab_backend.shared import CamelModel, Difficulty


class QuestionStats(CamelModel):
    """Aggregated member responses for a single question."""

    solved_count: int = 0
    attempted_count: int = 0
    stuck_count: int = 0
    total_responses: int = 0
    average_time_to_solve: int | None = None
    member_difficulty_rating: Difficulty | None = None
    difficulty_distribution: dict[str, int] = Field(default_factory=dict)


class MemberStats(CamelModel):
    """A member's track record across a group's active questions."""

    problems_solved: int = 0
    success_rate: int = 0
    current_streak: int = 0
    total_responses: int = 0
    total_questions: int = 0
    average_time_to_solve: int | None = None
    questions_attempted: int = 0
    rank: int | None = None
