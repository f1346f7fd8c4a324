from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Callable
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from codecollab_backend.database import DatabaseService, FeedbackSchema

Factory = Callable[..., dict[str, Any]]


@pytest.fixture
def question(
    register: Factory,
    create_group: Factory,
    create_question: Factory,
) -> dict[str, Any]:
    owner = register("Owner")
    group = create_group(owner)
    return {"owner": owner, "group": group, **create_question(owner, group)}


def _submit(
    client: TestClient, user: dict[str, Any], question: dict[str, Any], **payload: Any
) -> Any:
    body = {
        "questionId": question["id"],
        "type": "difficulty_rating",
        "votedDifficulty": "Hard",
    }
    body.update(payload)
    return client.post("/api/feedback/submit", json=body, headers=user["headers"])


def test_submit_difficulty_feedback(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register("Reviewer")

    response = _submit(
        client, reviewer, question, comment="  tricky edge cases ", tags=[" DP ", ""]
    )

    assert response.status_code == 201
    feedback = response.json()["feedback"]
    assert feedback["type"] == "difficulty_rating"
    assert feedback["votedDifficulty"] == "Hard"
    assert feedback["comment"] == "tricky edge cases"
    assert feedback["tags"] == ["dp"]
    assert feedback["status"] == "active"
    assert feedback["helpfulScore"] == 0
    assert feedback["user"]["name"] == "Reviewer"


@pytest.mark.parametrize(
    ("payload", "status_code"),
    [
        ({"votedDifficulty": None}, 400),
        ({"type": "question_review", "votedDifficulty": None}, 400),
        ({"type": "question_review", "rating": 6}, 422),
        ({"tags": ["x" * 31]}, 400),
    ],
)
def test_submit_feedback_validation(
    client: TestClient,
    register: Factory,
    question: dict[str, Any],
    payload: dict[str, Any],
    status_code: int,
) -> None:
    response = _submit(client, register(), question, **payload)

    assert response.status_code == status_code


def test_submit_feedback_once_per_type(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    assert _submit(client, reviewer, question).status_code == 201

    duplicate = _submit(client, reviewer, question, votedDifficulty="Easy")
    review = _submit(client, reviewer, question, type="question_review", rating=4)

    assert duplicate.status_code == 400
    assert review.status_code == 201


def test_deleted_feedback_can_be_submitted_again(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    voter = register()
    first = _submit(client, reviewer, question).json()["feedback"]
    client.post(
        f"/api/feedback/{first['id']}/vote",
        json={"voteType": "upvote"},
        headers=voter["headers"],
    )
    client.delete(f"/api/feedback/{first['id']}", headers=reviewer["headers"])

    again = _submit(client, reviewer, question, votedDifficulty="Medium")

    assert again.status_code == 201
    feedback = again.json()["feedback"]
    assert feedback["id"] == first["id"]
    assert feedback["votedDifficulty"] == "Medium"
    assert feedback["upvotes"] == 0


def test_feedback_on_private_question_requires_membership(
    client: TestClient,
    register: Factory,
    create_group: Factory,
    create_question: Factory,
) -> None:
    owner = register()
    hidden = create_group(owner, name="Secret circle", isPrivate=True)
    private_question = create_question(owner, hidden)

    response = _submit(client, register(), private_question)

    assert response.status_code == 403


def test_question_feedback_lists_with_statistics(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    first = register("First")
    second = register("Second")
    _submit(client, first, question, isAnonymous=True)
    _submit(client, second, question, votedDifficulty="Medium")
    for reviewer, rating in ((first, 4), (second, 5)):
        _submit(
            client,
            reviewer,
            question,
            type="question_review",
            votedDifficulty=None,
            rating=rating,
        )

    response = client.get(
        f"/api/feedback/question/{question['id']}", headers=second["headers"]
    )

    assert response.status_code == 200
    data = response.json()
    assert data["statistics"]["totalFeedbacks"] == 4
    assert data["statistics"]["averageRating"] == 4.5
    assert data["statistics"]["difficultyBreakdown"] == {"Hard": 1, "Medium": 1}
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalItems": 4,
        "hasNext": False,
        "hasPrev": False,
    }
    anonymous = [entry for entry in data["feedbacks"] if entry["isAnonymous"]]
    assert len(anonymous) == 1
    assert anonymous[0]["user"] is None


def test_question_feedback_filters_by_type_and_paginates(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    for _ in range(3):
        _submit(client, register(), question, type="general", votedDifficulty=None)
    _submit(client, register(), question)

    response = client.get(
        f"/api/feedback/question/{question['id']}",
        params={"type": "general", "limit": 2, "page": 2},
        headers=question["owner"]["headers"],
    )

    data = response.json()
    assert len(data["feedbacks"]) == 1
    assert data["pagination"]["totalItems"] == 3
    assert data["pagination"]["hasPrev"] is True
    assert data["pagination"]["hasNext"] is False


def test_my_feedback_shows_own_anonymous_entries(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register("Reviewer")
    _submit(client, reviewer, question, isAnonymous=True)

    response = client.get("/api/feedback/my-feedback", headers=reviewer["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["totalItems"] == 1
    assert data["feedbacks"][0]["user"]["name"] == "Reviewer"


def test_update_feedback_owner_only(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]

    denied = client.put(
        f"/api/feedback/{feedback['id']}",
        json={"comment": "hijack"},
        headers=question["owner"]["headers"],
    )
    response = client.put(
        f"/api/feedback/{feedback['id']}",
        json={"votedDifficulty": "Easy", "comment": "easier on reflection"},
        headers=reviewer["headers"],
    )

    assert denied.status_code == 403
    assert response.status_code == 200
    assert response.json()["message"] == "Feedback updated successfully"
    assert response.json()["feedback"]["votedDifficulty"] == "Easy"
    assert response.json()["feedback"]["comment"] == "easier on reflection"


def test_update_feedback_closes_after_24_hours(
    client: TestClient,
    database: DatabaseService,
    register: Factory,
    question: dict[str, Any],
) -> None:
    reviewer = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]
    with database.session() as session:
        stored = session.get(FeedbackSchema, UUID(feedback["id"]))
        assert stored is not None
        stored.created_at = datetime.now(UTC) - timedelta(hours=25)

    response = client.put(
        f"/api/feedback/{feedback['id']}",
        json={"comment": "too late"},
        headers=reviewer["headers"],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Feedback can only be edited within 24 hours"


def test_delete_feedback_hides_it(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]

    denied = client.delete(
        f"/api/feedback/{feedback['id']}", headers=question["owner"]["headers"]
    )
    response = client.delete(f"/api/feedback/{feedback['id']}", headers=reviewer["headers"])
    again = client.delete(f"/api/feedback/{feedback['id']}", headers=reviewer["headers"])

    assert denied.status_code == 403
    assert response.status_code == 200
    assert again.status_code == 404
    listing = client.get(
        f"/api/feedback/question/{question['id']}", headers=reviewer["headers"]
    ).json()
    assert listing["feedbacks"] == []


def test_vote_replaces_previous_vote(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    voter = register()
    other = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]
    url = f"/api/feedback/{feedback['id']}/vote"

    client.post(url, json={"voteType": "upvote"}, headers=voter["headers"])
    client.post(url, json={"voteType": "upvote"}, headers=other["headers"])
    response = client.post(url, json={"voteType": "downvote"}, headers=voter["headers"])

    assert response.status_code == 200
    assert response.json() == {
        "message": "Vote recorded successfully",
        "helpfulScore": 0,
        "upvotes": 1,
        "downvotes": 1,
    }


def test_cannot_vote_on_own_feedback(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]

    response = client.post(
        f"/api/feedback/{feedback['id']}/vote",
        json={"voteType": "upvote"},
        headers=reviewer["headers"],
    )

    assert response.status_code == 400


def test_feedback_sorted_by_helpful_score(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    first = _submit(client, register(), question).json()["feedback"]
    second = _submit(client, register(), question).json()["feedback"]
    client.post(
        f"/api/feedback/{first['id']}/vote",
        json={"voteType": "upvote"},
        headers=register()["headers"],
    )

    response = client.get(
        f"/api/feedback/question/{question['id']}",
        params={"sortBy": "helpfulScore"},
        headers=question["owner"]["headers"],
    )

    assert [entry["id"] for entry in response.json()["feedbacks"]] == [
        first["id"],
        second["id"],
    ]


def test_reports_flag_feedback_after_threshold(
    client: TestClient, register: Factory, question: dict[str, Any]
) -> None:
    reviewer = register()
    feedback = _submit(client, reviewer, question).json()["feedback"]
    url = f"/api/feedback/{feedback['id']}/report"
    reporters = [register() for _ in range(3)]

    first = client.post(url, json={"reason": "spam"}, headers=reporters[0]["headers"])
    duplicate = client.post(url, json={"reason": "other"}, headers=reporters[0]["headers"])
    for reporter in reporters[1:]:
        client.post(
            url,
            json={"reason": "offensive", "description": "rude"},
            headers=reporter["headers"],
        )

    assert first.status_code == 200
    assert duplicate.status_code == 400
    listing = client.get(
        f"/api/feedback/question/{question['id']}", headers=reviewer["headers"]
    ).json()
    assert listing["feedbacks"] == []
    mine = client.get("/api/feedback/my-feedback", headers=reviewer["headers"]).json()
    assert mine["feedbacks"][0]["status"] == "reported"
