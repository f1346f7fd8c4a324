"""Shared enumerations used across the backend."""

from enum import StrEnum


class UserRole(StrEnum):
    """Platform-wide account roles."""

    USER = "user"
    ADMIN = "admin"


class GroupCategory(StrEnum):
    """Categories a study group can be filed under."""

    STUDY_GROUP = "Study Group"
    PROGRAMMING = "Programming"
    INTERVIEW_PREP = "Interview Prep"
    PROJECT_TEAM = "Project Team"
    GENERAL = "General"
    OTHER = "Other"


class MemberRole(StrEnum):
    """Role of a user inside a single group."""

    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class MemberStatus(StrEnum):
    """Lifecycle state of a group membership."""

    ACTIVE = "active"
    PENDING = "pending"
    BANNED = "banned"
    LEFT = "left"


class Difficulty(StrEnum):
    """Difficulty buckets shared by questions, responses and feedback."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Platform(StrEnum):
    """Judge platforms a question can be sourced from."""

    LEETCODE = "LeetCode"
    HACKERRANK = "HackerRank"
    CODEFORCES = "CodeForces"
    GEEKSFORGEEKS = "GeeksforGeeks"
    INTERVIEWBIT = "InterviewBit"
    OTHER = "Other"


class QuestionStatus(StrEnum):
    """Visibility state of a posted question."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class ResponseStatus(StrEnum):
    """Outcome a member reports for a question."""

    SOLVED = "solved"
    ATTEMPTED = "attempted"
    STUCK = "stuck"


class FeedbackType(StrEnum):
    """Kinds of feedback that can be left on a question."""

    DIFFICULTY_RATING = "difficulty_rating"
    QUESTION_REVIEW = "question_review"
    SOLUTION_REVIEW = "solution_review"
    GENERAL = "general"


class FeedbackStatus(StrEnum):
    """Moderation state of a feedback entry."""

    ACTIVE = "active"
    HIDDEN = "hidden"
    REPORTED = "reported"
    DELETED = "deleted"


class VoteType(StrEnum):
    """Helpfulness vote direction."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class ReportReason(StrEnum):
    """Reasons accepted when reporting feedback."""

    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    OFFENSIVE = "offensive"
    IRRELEVANT = "irrelevant"
    OTHER = "other"
