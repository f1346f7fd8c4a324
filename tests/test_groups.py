from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Callable

from fastapi.testclient import TestClient
from sqlalchemy import select

from codecollab_backend.database import DatabaseService, GroupSchema

Factory = Callable[..., dict[str, Any]]


def test_create_group_makes_creator_admin(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()

    group = create_group(owner, tags=[" Graphs ", "DP"], category="Interview Prep")

    assert group["admin"]["id"] == owner["id"]
    assert group["tags"] == ["graphs", "dp"]
    assert group["category"] == "Interview Prep"
    assert len(group["inviteCode"]) == 8
    assert group["inviteCode"] == group["inviteCode"].upper()
    assert group["totalMembers"] == 1
    assert group["settings"]["allowMemberInvites"] is True

    details = client.get(f"/api/groups/{group['id']}", headers=owner["headers"]).json()
    assert details["userRole"] == "admin"
    assert details["userStatus"] == "active"


def test_create_group_validates_payload(client: TestClient, register: Factory) -> None:
    owner = register()

    response = client.post(
        "/api/groups/create",
        json={"name": "ab", "tags": ["x" * 21]},
        headers=owner["headers"],
    )

    assert response.status_code == 422


def test_group_creation_is_capped_per_admin(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    for number in range(10):
        create_group(owner, name=f"Group number {number}")

    response = client.post(
        "/api/groups/create", json={"name": "One too many"}, headers=owner["headers"]
    )

    assert response.status_code == 400


def test_join_group_by_invite_code(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)

    response = client.post(
        "/api/groups/join",
        json={"inviteCode": f"  {group['inviteCode'].lower()} "},
        headers=member["headers"],
    )

    assert response.status_code == 200
    assert response.json()["group"]["totalMembers"] == 2

    again = client.post(
        "/api/groups/join",
        json={"inviteCode": group["inviteCode"]},
        headers=member["headers"],
    )
    assert again.status_code == 400


def test_join_group_unknown_code(client: TestClient, register: Factory) -> None:
    member = register()

    response = client.post(
        "/api/groups/join", json={"inviteCode": "DEADBEEF"}, headers=member["headers"]
    )

    assert response.status_code == 404


def test_join_group_rejects_expired_code(
    client: TestClient,
    database: DatabaseService,
    register: Factory,
    create_group: Factory,
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    with database.session() as session:
        stored = session.scalar(
            select(GroupSchema).where(GroupSchema.invite_code == group["inviteCode"])
        )
        assert stored is not None
        stored.invite_code_expiry = datetime.now(UTC) - timedelta(hours=1)

    response = client.post(
        "/api/groups/join",
        json={"inviteCode": group["inviteCode"]},
        headers=member["headers"],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invite code has expired"


def test_join_group_when_full(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    group = create_group(owner, maxMembers=2)
    join_group(register(), group)

    response = client.post(
        "/api/groups/join",
        json={"inviteCode": group["inviteCode"]},
        headers=register()["headers"],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "This group is full"


def test_my_groups_lists_memberships_with_counts(
    client: TestClient,
    register: Factory,
    create_group: Factory,
    join_group: Callable,
    create_question: Factory,
) -> None:
    owner = register()
    member = register()
    first = create_group(owner, name="First group")
    second = create_group(owner, name="Second group")
    join_group(member, first)
    join_group(member, second)
    create_question(owner, first)

    response = client.get("/api/groups/my-groups", headers=member["headers"])

    assert response.status_code == 200
    groups = response.json()["groups"]
    assert [entry["name"] for entry in groups] == ["Second group", "First group"]
    by_name = {entry["name"]: entry for entry in groups}
    assert by_name["First group"]["memberCount"] == 2
    assert by_name["First group"]["questionCount"] == 1
    assert by_name["First group"]["userRole"] == "member"


def test_private_group_hidden_from_outsiders(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    outsider = register()
    group = create_group(owner, isPrivate=True)

    details = client.get(f"/api/groups/{group['id']}", headers=outsider["headers"])
    members = client.get(
        f"/api/groups/{group['id']}/members", headers=outsider["headers"]
    )

    assert details.status_code == 403
    assert members.status_code == 403


def test_public_group_details_hide_invite_code_from_outsiders(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    outsider = register()
    group = create_group(owner)

    response = client.get(f"/api/groups/{group['id']}", headers=outsider["headers"])

    assert response.status_code == 200
    assert response.json()["inviteCode"] is None
    assert response.json()["userRole"] is None


def test_update_group_settings_admin_only(
    client: TestClient,
    register: Factory,
    create_group: Factory,
    join_group: Callable,
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    join_group(member, group)

    denied = client.put(
        f"/api/groups/{group['id']}",
        json={"name": "Hijacked"},
        headers=member["headers"],
    )
    response = client.put(
        f"/api/groups/{group['id']}",
        json={"description": "Updated", "settings": {"allowQuestionPosting": False}},
        headers=owner["headers"],
    )

    assert denied.status_code == 403
    assert response.status_code == 200
    data = response.json()["group"]
    assert data["description"] == "Updated"
    assert data["settings"]["allowQuestionPosting"] is False
    assert data["settings"]["allowMemberInvites"] is True


def test_members_include_statistics_and_ranks(
    client: TestClient,
    register: Factory,
    create_group: Factory,
    join_group: Callable,
    create_question: Factory,
) -> None:
    owner = register("Owner")
    member = register("Solver")
    group = create_group(owner)
    join_group(member, group)
    question = create_question(owner, group)
    client.post(
        f"/api/questions/{question['id']}/response",
        json={"status": "solved", "difficultyRating": "Easy", "timeToSolve": 12},
        headers=member["headers"],
    )

    response = client.get(f"/api/groups/{group['id']}/members", headers=owner["headers"])

    assert response.status_code == 200
    members = {entry["user"]["name"]: entry for entry in response.json()["members"]}
    assert members["Solver"]["stats"]["problemsSolved"] == 1
    assert members["Solver"]["stats"]["successRate"] == 100
    assert members["Solver"]["stats"]["averageTimeToSolve"] == 12
    assert members["Solver"]["stats"]["rank"] == 1
    assert members["Owner"]["stats"]["rank"] == 2
    assert members["Owner"]["stats"]["totalQuestions"] == 1


def test_group_questions_list_newest_first(
    client: TestClient, register: Factory, create_group: Factory, create_question: Factory
) -> None:
    owner = register()
    group = create_group(owner)
    first = create_question(owner, group)
    second = create_question(owner, group)

    response = client.get(f"/api/groups/{group['id']}/questions", headers=owner["headers"])

    assert response.status_code == 200
    ids = [entry["id"] for entry in response.json()["questions"]]
    assert set(ids) == {first["id"], second["id"]}


def test_admin_cannot_leave_with_other_members(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    group = create_group(owner)
    join_group(register(), group)

    response = client.post(f"/api/groups/{group['id']}/leave", headers=owner["headers"])

    assert response.status_code == 400


def test_sole_admin_leaving_closes_group(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    group = create_group(owner)

    response = client.post(f"/api/groups/{group['id']}/leave", headers=owner["headers"])

    assert response.status_code == 200
    assert client.get(f"/api/groups/{group['id']}", headers=owner["headers"]).status_code == 404


def test_member_can_leave_and_rejoin(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    join_group(member, group)

    left = client.post(f"/api/groups/{group['id']}/leave", headers=member["headers"])
    not_member = client.post(f"/api/groups/{group['id']}/leave", headers=member["headers"])

    assert left.status_code == 200
    assert not_member.status_code == 400
    join_group(member, group)
    details = client.get(f"/api/groups/{group['id']}", headers=member["headers"]).json()
    assert details["userStatus"] == "active"
    assert details["totalMembers"] == 2


def test_removed_member_is_banned(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    join_group(member, group)

    denied = client.delete(
        f"/api/groups/{group['id']}/members/{owner['id']}", headers=member["headers"]
    )
    response = client.request(
        "DELETE",
        f"/api/groups/{group['id']}/members/{member['id']}",
        json={"reason": "Spam"},
        headers=owner["headers"],
    )
    rejoin = client.post(
        "/api/groups/join",
        json={"inviteCode": group["inviteCode"]},
        headers=member["headers"],
    )

    assert denied.status_code == 403
    assert response.status_code == 200
    assert rejoin.status_code == 403


def test_admin_cannot_be_removed(
    client: TestClient, register: Factory, create_group: Factory
) -> None:
    owner = register()
    group = create_group(owner)

    response = client.delete(
        f"/api/groups/{group['id']}/members/{owner['id']}", headers=owner["headers"]
    )

    assert response.status_code == 400


def test_invite_code_regeneration(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    join_group(member, group)

    response = client.post(
        f"/api/groups/{group['id']}/invite-code",
        json={"expiryHours": 2},
        headers=member["headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["inviteCode"] != group["inviteCode"]
    assert data["inviteCodeExpiry"] is not None
    old = client.post(
        "/api/groups/join",
        json={"inviteCode": group["inviteCode"]},
        headers=register()["headers"],
    )
    assert old.status_code == 404


def test_invite_code_requires_permission_when_member_invites_disabled(
    client: TestClient, register: Factory, create_group: Factory, join_group: Callable
) -> None:
    owner = register()
    member = register()
    group = create_group(owner)
    join_group(member, group)
    client.put(
        f"/api/groups/{group['id']}",
        json={"settings": {"allowMemberInvites": False}},
        headers=owner["headers"],
    )

    response = client.post(
        f"/api/groups/{group['id']}/invite-code", headers=member["headers"]
    )

    assert response.status_code == 403
