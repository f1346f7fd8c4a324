"""Create users, groups, questions and feedback tables."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name: str, *values: str) -> postgresql.ENUM:
    return postgresql.ENUM(*values, name=name, create_type=False)


USER_ROLE = _enum("user_role", "user", "admin")
GROUP_CATEGORY = _enum(
    "group_category",
    "Study Group",
    "Programming",
    "Interview Prep",
    "Project Team",
    "General",
    "Other",
)
MEMBER_ROLE = _enum("member_role", "member", "moderator", "admin")
MEMBER_STATUS = _enum("member_status", "active", "pending", "banned", "left")
DIFFICULTY = _enum("difficulty", "Easy", "Medium", "Hard")
PLATFORM = _enum(
    "platform",
    "LeetCode",
    "HackerRank",
    "CodeForces",
    "GeeksforGeeks",
    "InterviewBit",
    "Other",
)
QUESTION_STATUS = _enum("question_status", "active", "archived", "deleted")
RESPONSE_STATUS = _enum("response_status", "solved", "attempted", "stuck")
FEEDBACK_TYPE = _enum(
    "feedback_type",
    "difficulty_rating",
    "question_review",
    "solution_review",
    "general",
)
FEEDBACK_STATUS = _enum("feedback_status", "active", "hidden", "reported", "deleted")
VOTE_TYPE = _enum("vote_type", "upvote", "downvote")
REPORT_REASON = _enum(
    "report_reason", "spam", "inappropriate", "offensive", "irrelevant", "other"
)

ENUMS = (
    USER_ROLE,
    GROUP_CATEGORY,
    MEMBER_ROLE,
    MEMBER_STATUS,
    DIFFICULTY,
    PLATFORM,
    QUESTION_STATUS,
    RESPONSE_STATUS,
    FEEDBACK_TYPE,
    FEEDBACK_STATUS,
    VOTE_TYPE,
    REPORT_REASON,
)


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=None if nullable else sa.func.now(),
        nullable=nullable,
    )


def _child_key(name: str, parent: str) -> sa.Column:
    return sa.Column(
        name,
        _uuid(),
        sa.ForeignKey(f"{parent}.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("avatar", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("role", USER_ROLE, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("password_changed_at", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "groups",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("admin_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("invite_code", sa.String(length=16), nullable=True, unique=True),
        _timestamp("invite_code_expiry", nullable=True),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("category", GROUP_CATEGORY, nullable=False, server_default="General"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("avatar", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_members", sa.Integer(), nullable=False, server_default="1"),
        _timestamp("last_activity"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_groups_admin_id", "groups", ["admin_id"])
    op.create_index("ix_groups_category", "groups", ["category"])
    op.create_index("ix_groups_created_at", "groups", ["created_at"])

    op.create_table(
        "group_members",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("group_id", _uuid(), sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("role", MEMBER_ROLE, nullable=False, server_default="member"),
        sa.Column("status", MEMBER_STATUS, nullable=False, server_default="active"),
        _timestamp("joined_at"),
        _timestamp("last_active"),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("invited_by", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("ban_reason", sa.String(length=500), nullable=True),
        _timestamp("banned_at", nullable=True),
        sa.Column("banned_by", _uuid(), sa.ForeignKey("users.id"), nullable=True),
        _timestamp("muted_until", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("user_id", "group_id", name="uq_group_members_user_group"),
    )
    op.create_index("ix_group_members_user_id", "group_members", ["user_id"])
    op.create_index("ix_group_members_group_id", "group_members", ["group_id"])

    op.create_table(
        "questions",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("source_url", sa.String(length=2048), nullable=False),
        sa.Column("difficulty", DIFFICULTY, nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("platform", PLATFORM, nullable=False),
        sa.Column("group_id", _uuid(), sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("posted_by", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", QUESTION_STATUS, nullable=False, server_default="active"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_questions_group_created", "questions", ["group_id", "created_at"])
    op.create_index("ix_questions_difficulty", "questions", ["difficulty"])
    op.create_index("ix_questions_category", "questions", ["category"])
    op.create_index("ix_questions_posted_by", "questions", ["posted_by"])

    op.create_table(
        "question_likes",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("question_id", "questions"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("question_id", "user_id", name="uq_question_likes_user"),
    )
    op.create_index("ix_question_likes_question_id", "question_likes", ["question_id"])

    op.create_table(
        "member_responses",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("question_id", "questions"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", RESPONSE_STATUS, nullable=False),
        sa.Column("difficulty_rating", DIFFICULTY, nullable=False),
        sa.Column("time_to_solve", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=False, server_default=""),
        _timestamp("submitted_at"),
        sa.UniqueConstraint("question_id", "user_id", name="uq_member_responses_user"),
    )
    op.create_index(
        "ix_member_responses_question_id", "member_responses", ["question_id"]
    )
    op.create_index("ix_member_responses_user_id", "member_responses", ["user_id"])

    op.create_table(
        "difficulty_ratings",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("question_id", "questions"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", DIFFICULTY, nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("question_id", "user_id", name="uq_difficulty_ratings_user"),
    )
    op.create_index(
        "ix_difficulty_ratings_question_id", "difficulty_ratings", ["question_id"]
    )

    op.create_table(
        "solutions",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("question_id", "questions"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=50), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("time_complexity", sa.String(length=50), nullable=True),
        sa.Column("space_complexity", sa.String(length=50), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_solutions_question_id", "solutions", ["question_id"])

    op.create_table(
        "feedback",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("question_id", _uuid(), sa.ForeignKey("questions.id"), nullable=False),
        sa.Column("type", FEEDBACK_TYPE, nullable=False),
        sa.Column("voted_difficulty", DIFFICULTY, nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("comment", sa.String(length=1000), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", FEEDBACK_STATUS, nullable=False, server_default="active"),
        _timestamp("last_modified"),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "user_id", "question_id", "type", name="uq_feedback_user_question_type"
        ),
    )
    op.create_index("ix_feedback_user_id", "feedback", ["user_id"])
    op.create_index("ix_feedback_created_at", "feedback", ["created_at"])
    op.create_index("ix_feedback_question_status", "feedback", ["question_id", "status"])

    op.create_table(
        "feedback_votes",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("feedback_id", "feedback"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vote_type", VOTE_TYPE, nullable=False),
        _timestamp("voted_at"),
        sa.UniqueConstraint("feedback_id", "user_id", name="uq_feedback_votes_user"),
    )
    op.create_index("ix_feedback_votes_feedback_id", "feedback_votes", ["feedback_id"])

    op.create_table(
        "feedback_reports",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        _child_key("feedback_id", "feedback"),
        sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reason", REPORT_REASON, nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        _timestamp("reported_at"),
        sa.UniqueConstraint("feedback_id", "user_id", name="uq_feedback_reports_user"),
    )
    op.create_index(
        "ix_feedback_reports_feedback_id", "feedback_reports", ["feedback_id"]
    )


def downgrade() -> None:
    for table in (
        "feedback_reports",
        "feedback_votes",
        "feedback",
        "solutions",
        "difficulty_ratings",
        "member_responses",
        "question_likes",
        "questions",
        "group_members",
        "groups",
        "users",
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
