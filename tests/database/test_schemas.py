"""Database schema specific tests."""

from typing import TYPE_CHECKING, cast

import pytest
from sqlalchemy import UniqueConstraint

if TYPE_CHECKING:
    from sqlalchemy import Table

from codecollab_backend.database.schemas import (
    FeedbackSchema,
    GroupMemberSchema,
    GroupSchema,
    QuestionSchema,
    UserSchema,
)
from codecollab_backend.shared import (
    Difficulty,
    FeedbackType,
    GroupCategory,
    MemberStatus,
    UserRole,
)


@pytest.mark.parametrize(
    ("schema", "column", "enum_cls"),
    [
        (UserSchema, "role", UserRole),
        (GroupSchema, "category", GroupCategory),
        (GroupMemberSchema, "status", MemberStatus),
        (QuestionSchema, "difficulty", Difficulty),
        (FeedbackSchema, "type", FeedbackType),
    ],
)
def test_enum_columns_use_enum_values(schema, column, enum_cls) -> None:
    table = cast("Table", schema.__table__)
    assert table.c[column].type.enums == [member.value for member in enum_cls]


def test_feedback_is_unique_per_user_question_and_type() -> None:
    table = cast("Table", FeedbackSchema.__table__)
    constraints = {
        tuple(column.name for column in constraint.columns)
        for constraint in table.constraints
        if isinstance(constraint, UniqueConstraint)
    }
    assert ("user_id", "question_id", "type") in constraints


def test_feedback_columns() -> None:
    table = cast("Table", FeedbackSchema.__table__)
    assert set(table.c.keys()) == {
        "id",
        "user_id",
        "question_id",
        "type",
        "voted_difficulty",
        "rating",
        "comment",
        "tags",
        "is_anonymous",
        "status",
        "last_modified",
        "created_at",
    }
