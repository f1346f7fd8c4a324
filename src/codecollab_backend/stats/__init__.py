"""Member-response aggregation: solve rates, streaks, rankings and averages."""

from codecollab_backend.stats.engine import (
    STREAK_WINDOW,
    assign_ranks,
    average_time_to_solve,
    current_streak,
    difficulty_score,
    member_difficulty_rating,
    member_stats,
    question_stats,
)
from codecollab_backend.stats.models import MemberStats, QuestionStats

__all__ = [
    "STREAK_WINDOW",
    "MemberStats",
    "QuestionStats",
    "assign_ranks",
    "average_time_to_solve",
    "current_streak",
    "difficulty_score",
    "member_difficulty_rating",
    "member_stats",
    "question_stats",
]
