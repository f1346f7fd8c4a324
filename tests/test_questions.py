from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

Factory = Callable[..., dict[str, Any]]


@pytest.fixture
def members(
    register: Factory, create_group: Factory, join_group: Callable
) -> dict[str, Any]:
    owner = register("Owner")
    member = register("Member")
    outsider = register("Outsider")
    group = create_group(owner)
    join_group(member, group)
    return {"owner": owner, "member": member, "outsider": outsider, "group": group}


def _respond(
    client: TestClient,
    user: dict[str, Any],
    question: dict[str, Any],
    **payload: Any,
) -> Any:
    body = {"status": "solved", "difficultyRating": "Medium"}
    body.update(payload)
    return client.post(
        f"/api/questions/{question['id']}/response", json=body, headers=user["headers"]
    )


def test_create_question(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["member"], members["group"], tags=[" graphs "])

    assert question["postedBy"]["id"] == members["member"]["id"]
    assert question["groupId"] == members["group"]["id"]
    assert question["tags"] == ["graphs"]
    assert question["views"] == 0
    assert question["likeCount"] == 0
    details = client.get(
        f"/api/groups/{members['group']['id']}", headers=members["owner"]["headers"]
    ).json()
    assert details["totalQuestions"] == 1


def test_create_question_requires_membership(
    client: TestClient, members: dict[str, Any]
) -> None:
    response = client.post(
        "/api/questions/create",
        json={
            "title": "Valid Parentheses",
            "sourceUrl": "https://leetcode.com/problems/valid-parentheses/",
            "difficulty": "Easy",
            "category": "Stacks",
            "platform": "LeetCode",
            "groupId": members["group"]["id"],
        },
        headers=members["outsider"]["headers"],
    )

    assert response.status_code == 403


def test_create_question_rejects_duplicate_source(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])

    response = client.post(
        "/api/questions/create",
        json={
            "title": "Same problem again",
            "sourceUrl": question["sourceUrl"],
            "difficulty": "Easy",
            "category": "Arrays",
            "platform": "LeetCode",
            "groupId": members["group"]["id"],
        },
        headers=members["member"]["headers"],
    )

    assert response.status_code == 400


def test_question_posting_can_be_disabled_for_members(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    client.put(
        f"/api/groups/{members['group']['id']}",
        json={"settings": {"allowQuestionPosting": False}},
        headers=members["owner"]["headers"],
    )

    response = client.post(
        "/api/questions/create",
        json={
            "title": "Blocked",
            "sourceUrl": "https://leetcode.com/problems/blocked/",
            "difficulty": "Hard",
            "category": "Graphs",
            "platform": "LeetCode",
            "groupId": members["group"]["id"],
        },
        headers=members["member"]["headers"],
    )

    assert response.status_code == 403
    create_question(members["owner"], members["group"])


def test_list_group_questions_with_stats(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    first = create_question(members["owner"], members["group"], difficulty="Hard")
    second = create_question(members["owner"], members["group"])
    _respond(client, members["member"], first, difficultyRating="Hard")
    _respond(client, members["owner"], first, status="attempted", difficultyRating="Hard")

    response = client.get(
        f"/api/questions/group/{members['group']['id']}",
        params={"sortBy": "solved"},
        headers=members["member"]["headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["totalQuestions"] == 2
    assert data["totalPages"] == 1
    assert data["currentPage"] == 1
    top = data["questions"][0]
    assert top["id"] == first["id"]
    assert top["solvedCount"] == 1
    assert top["attemptedCount"] == 1
    assert top["totalResponses"] == 2
    assert top["memberDifficultyRating"] == "Hard"
    assert top["userResponse"]["status"] == "solved"
    assert data["questions"][1]["id"] == second["id"]
    assert data["questions"][1]["userResponse"] is None


def test_list_group_questions_filters_and_paginates(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    for _ in range(3):
        create_question(members["owner"], members["group"], difficulty="Medium")
    create_question(members["owner"], members["group"], difficulty="Easy")

    response = client.get(
        f"/api/questions/group/{members['group']['id']}",
        params={"difficulty": "Medium", "limit": 2, "page": 2},
        headers=members["owner"]["headers"],
    )

    data = response.json()
    assert data["totalQuestions"] == 3
    assert data["totalPages"] == 2
    assert len(data["questions"]) == 1
    assert client.get(
        f"/api/questions/group/{members['group']['id']}",
        params={"limit": 101},
        headers=members["owner"]["headers"],
    ).status_code == 422


def test_list_group_questions_sorted_by_likes(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    popular = create_question(members["owner"], members["group"])
    unliked = create_question(members["owner"], members["group"])
    liked_once = create_question(members["owner"], members["group"])
    for user in (members["owner"], members["member"]):
        client.post(f"/api/questions/{popular['id']}/like", headers=user["headers"])
    client.post(
        f"/api/questions/{liked_once['id']}/like", headers=members["member"]["headers"]
    )

    response = client.get(
        f"/api/questions/group/{members['group']['id']}",
        params={"sortBy": "likes"},
        headers=members["member"]["headers"],
    )

    questions = response.json()["questions"]
    assert [entry["id"] for entry in questions] == [
        popular["id"],
        liked_once["id"],
        unliked["id"],
    ]
    assert [entry["likeCount"] for entry in questions] == [2, 1, 0]


def test_search_requires_two_characters(
    client: TestClient, members: dict[str, Any]
) -> None:
    response = client.get(
        "/api/questions/search", params={"q": "a"}, headers=members["owner"]["headers"]
    )

    assert response.status_code == 400


def test_search_matches_title_and_tags_in_visible_groups(
    client: TestClient,
    members: dict[str, Any],
    create_group: Factory,
    create_question: Factory,
) -> None:
    create_question(members["owner"], members["group"], title="Course Schedule")
    create_question(members["owner"], members["group"], title="Word Ladder", tags=["BFS"])
    hidden = create_group(members["owner"], name="Secret circle", isPrivate=True)
    create_question(members["owner"], hidden, title="Course Schedule II")

    by_title = client.get(
        "/api/questions/search",
        params={"q": "course"},
        headers=members["outsider"]["headers"],
    )
    by_tag = client.get(
        "/api/questions/search", params={"q": "bfs"}, headers=members["member"]["headers"]
    )
    as_owner = client.get(
        "/api/questions/search", params={"q": "course"}, headers=members["owner"]["headers"]
    )

    assert [entry["title"] for entry in by_title.json()["questions"]] == ["Course Schedule"]
    assert [entry["title"] for entry in by_tag.json()["questions"]] == ["Word Ladder"]
    assert len(as_owner.json()["questions"]) == 2


@pytest.mark.parametrize("term", ['", "', 'bfs", "gr', "[\""])
def test_search_does_not_match_across_tag_boundaries(
    client: TestClient, members: dict[str, Any], create_question: Factory, term: str
) -> None:
    create_question(
        members["owner"], members["group"], title="Word Ladder", tags=["bfs", "graph"]
    )

    response = client.get(
        "/api/questions/search", params={"q": term}, headers=members["member"]["headers"]
    )

    assert response.status_code == 200
    assert response.json()["questions"] == []


def test_search_matches_part_of_a_single_tag(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    create_question(
        members["owner"], members["group"], title="Word Ladder", tags=["bfs", "graph"]
    )

    response = client.get(
        "/api/questions/search", params={"q": "raph"}, headers=members["member"]["headers"]
    )

    assert [entry["title"] for entry in response.json()["questions"]] == ["Word Ladder"]


def test_get_question_counts_views_except_poster(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])

    client.get(f"/api/questions/{question['id']}", headers=members["owner"]["headers"])
    response = client.get(
        f"/api/questions/{question['id']}", headers=members["member"]["headers"]
    )

    assert response.status_code == 200
    data = response.json()["question"]
    assert data["views"] == 1
    assert data["liked"] is False
    assert data["stats"]["totalResponses"] == 0


def test_question_in_private_group_is_hidden(
    client: TestClient,
    members: dict[str, Any],
    create_group: Factory,
    create_question: Factory,
) -> None:
    hidden = create_group(members["owner"], name="Secret circle", isPrivate=True)
    question = create_question(members["owner"], hidden)

    response = client.get(
        f"/api/questions/{question['id']}", headers=members["outsider"]["headers"]
    )

    assert response.status_code == 403


def test_update_question_by_poster_or_admin(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["member"], members["group"])
    other = create_question(members["owner"], members["group"])

    by_poster = client.put(
        f"/api/questions/{question['id']}",
        json={"title": "Two Sum II", "difficulty": "Medium"},
        headers=members["member"]["headers"],
    )
    by_admin = client.put(
        f"/api/questions/{question['id']}",
        json={"category": "Hashing"},
        headers=members["owner"]["headers"],
    )
    denied = client.put(
        f"/api/questions/{other['id']}",
        json={"title": "Nope"},
        headers=members["member"]["headers"],
    )

    assert by_poster.status_code == 200
    assert by_poster.json()["question"]["title"] == "Two Sum II"
    assert by_admin.json()["question"]["category"] == "Hashing"
    assert by_admin.json()["question"]["difficulty"] == "Medium"
    assert denied.status_code == 403


def test_delete_question_is_soft(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["member"], members["group"])

    response = client.delete(
        f"/api/questions/{question['id']}", headers=members["member"]["headers"]
    )

    assert response.status_code == 200
    assert client.get(
        f"/api/questions/{question['id']}", headers=members["member"]["headers"]
    ).status_code == 404
    details = client.get(
        f"/api/groups/{members['group']['id']}", headers=members["owner"]["headers"]
    ).json()
    assert details["totalQuestions"] == 0


def test_like_toggles(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])
    url = f"/api/questions/{question['id']}/like"

    liked = client.post(url, headers=members["member"]["headers"]).json()
    unliked = client.post(url, headers=members["member"]["headers"]).json()

    assert liked["liked"] is True
    assert liked["likeCount"] == 1
    assert unliked["liked"] is False
    assert unliked["likeCount"] == 0


def test_rate_difficulty_upserts(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])
    url = f"/api/questions/{question['id']}/rate"
    member, outsider = members["member"]["headers"], members["outsider"]["headers"]

    first = client.post(url, json={"rating": "Easy"}, headers=member)
    second = client.post(url, json={"rating": "Hard"}, headers=member)
    invalid = client.post(url, json={"rating": "Brutal"}, headers=member)
    denied = client.post(url, json={"rating": "Easy"}, headers=outsider)

    assert [first.status_code, second.status_code] == [200, 200]
    assert invalid.status_code == 422
    assert denied.status_code == 403

    details = client.get(
        f"/api/questions/{question['id']}", headers=members["member"]["headers"]
    ).json()["question"]
    assert details["userRating"] == "Hard"


def test_solutions(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])
    url = f"/api/questions/{question['id']}/solutions"

    created = client.post(
        url,
        json={
            "code": "def two_sum(nums, target): ...",
            "language": "python",
            "timeComplexity": "O(n)",
        },
        headers=members["member"]["headers"],
    )
    listed = client.get(url, headers=members["owner"]["headers"])

    assert created.status_code == 201
    assert created.json()["solution"]["user"]["name"] == "Member"
    assert [entry["timeComplexity"] for entry in listed.json()["solutions"]] == ["O(n)"]


def test_submit_response_upserts_and_returns_stats(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])

    first = _respond(
        client, members["member"], question, status="stuck", difficultyRating="Hard"
    )
    second = _respond(
        client, members["member"], question, timeToSolve=25, notes="  used a hash map "
    )

    assert first.status_code == 200
    assert first.json()["message"] == "Response submitted successfully"
    assert second.json()["message"] == "Response updated successfully"
    data = second.json()
    assert data["response"]["notes"] == "used a hash map"
    assert data["questionStats"]["solvedCount"] == 1
    assert data["questionStats"]["stuckCount"] == 0
    assert data["questionStats"]["totalResponses"] == 1
    assert data["questionStats"]["averageTimeToSolve"] == 25
    assert data["questionStats"]["difficultyDistribution"] == {"Medium": 1}


def test_submit_response_requires_membership(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])

    response = _respond(client, members["outsider"], question)
    invalid = _respond(client, members["member"], question, status="gave-up")

    assert response.status_code == 403
    assert invalid.status_code == 422


def test_get_own_response(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])
    url = f"/api/questions/{question['id']}/response"

    empty = client.get(url, headers=members["member"]["headers"]).json()
    _respond(client, members["member"], question)
    filled = client.get(url, headers=members["member"]["headers"]).json()

    assert empty["response"] is None
    assert empty["questionStats"]["totalResponses"] == 0
    assert filled["response"]["status"] == "solved"
    assert filled["questionStats"]["memberDifficultyRating"] == "Medium"


def test_member_responses_grouped_by_status(
    client: TestClient, members: dict[str, Any], create_question: Factory
) -> None:
    question = create_question(members["owner"], members["group"])
    _respond(client, members["member"], question, timeToSolve=10)
    _respond(client, members["owner"], question, status="stuck", difficultyRating="Hard")

    response = client.get(
        f"/api/questions/{question['id']}/responses", headers=members["owner"]["headers"]
    )
    denied = client.get(
        f"/api/questions/{question['id']}/responses",
        headers=members["outsider"]["headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["question"]["id"] == question["id"]
    assert [entry["user"]["name"] for entry in data["responses"]["solved"]] == ["Member"]
    assert [entry["user"]["name"] for entry in data["responses"]["stuck"]] == ["Owner"]
    assert data["responses"]["attempted"] == []
    assert data["stats"]["memberDifficultyRating"] == "Medium"
    assert denied.status_code == 403
