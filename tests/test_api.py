"""Tests for the PR Reviewer REST API."""
import pytest
from httpx import ASGITransport, AsyncClient

from prreviewer.api import create_app
from prreviewer.api.dependencies import get_statistics_service
from prreviewer.core.config.settings import init_config
from prreviewer.core.storage import StoreError, init_db

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def client(app):
    """Create test client with in-memory database."""
    config = init_config()
    config.db_path = ":memory:"
    config.admin_token = ADMIN_TOKEN

    db = init_db(config.get_database_url())
    await db.create_tables()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    await db.close()


async def _add_team(client, team_name, *user_ids, inactive=()):
    members = [
        {"user_id": user_id, "username": f"user-{user_id}", "is_active": user_id not in inactive}
        for user_id in user_ids
    ]
    response = await client.post("/team/add", json={"team_name": team_name, "members": members})
    assert response.status_code == 201
    return response.json()


async def _create_pr(client, pull_request_id, author_id, name="feat"):
    return await client.post(
        "/pullRequest/create",
        json={
            "pull_request_id": pull_request_id,
            "pull_request_name": name,
            "author_id": author_id,
        },
    )


def _assert_error(response, status_code, code):
    assert response.status_code == status_code
    body = response.json()
    assert body["error"]["code"] == code
    assert body["error"]["message"]


async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "pr-reviewer"}


async def test_add_team(client):
    data = await _add_team(client, "backend", "u1", "u2")

    assert data["team"]["team_name"] == "backend"
    assert [m["user_id"] for m in data["team"]["members"]] == ["u1", "u2"]
    assert all(m["is_active"] for m in data["team"]["members"])


async def test_add_team_twice(client):
    await _add_team(client, "backend", "u1")

    response = await client.post(
        "/team/add",
        json={"team_name": "backend", "members": [{"user_id": "u2", "username": "B"}]},
    )
    _assert_error(response, 400, "TEAM_EXISTS")


async def test_add_team_validation(client):
    response = await client.post("/team/add", json={"team_name": "backend", "members": []})
    _assert_error(response, 400, "INVALID_INPUT")

    response = await client.post("/team/add", json={"members": [{"user_id": "u1"}]})
    _assert_error(response, 400, "INVALID_INPUT")

    response = await client.post(
        "/team/add", content="not json", headers={"Content-Type": "application/json"}
    )
    _assert_error(response, 400, "INVALID_INPUT")


async def test_get_team(client):
    await _add_team(client, "backend", "u2", "u1", inactive=("u2",))

    response = await client.get("/team/get", params={"team_name": "backend"})

    assert response.status_code == 200
    data = response.json()
    assert data["team_name"] == "backend"
    assert [(m["user_id"], m["is_active"]) for m in data["members"]] == [
        ("u1", True),
        ("u2", False),
    ]


async def test_get_team_errors(client):
    _assert_error(await client.get("/team/get", params={"team_name": "nope"}), 404, "NOT_FOUND")
    _assert_error(await client.get("/team/get"), 400, "INVALID_INPUT")


async def test_create_pull_request(client):
    await _add_team(client, "engineering", "A", "B", "C")

    response = await _create_pr(client, "pr1", "A")

    assert response.status_code == 201
    pr = response.json()["pr"]
    assert pr["pull_request_id"] == "pr1"
    assert pr["status"] == "OPEN"
    assert "A" not in pr["assigned_reviewers"]
    assert set(pr["assigned_reviewers"]) <= {"B", "C"}
    assert pr["createdAt"].endswith("Z")
    assert "mergedAt" not in pr


async def test_create_pull_request_errors(client):
    await _add_team(client, "engineering", "A", "B")
    await _create_pr(client, "pr1", "A")

    _assert_error(await _create_pr(client, "pr1", "B"), 400, "PR_EXISTS")
    _assert_error(await _create_pr(client, "pr2", "ghost"), 404, "NOT_FOUND")

    response = await client.post("/pullRequest/create", json={"pull_request_id": "pr3"})
    _assert_error(response, 400, "INVALID_INPUT")


async def test_merge_is_idempotent(client):
    await _add_team(client, "engineering", "A", "B")
    await _create_pr(client, "pr1", "A")

    first = await client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})
    second = await client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["pr"]["status"] == "MERGED"
    assert first.json()["pr"]["mergedAt"].endswith("Z")
    assert second.json() == first.json()

    response = await client.post("/pullRequest/merge", json={"pull_request_id": "missing"})
    _assert_error(response, 404, "NOT_FOUND")


async def test_reassign(client):
    await _add_team(client, "engineering", "A", "B", "C", "D")
    pr = (await _create_pr(client, "pr1", "A")).json()["pr"]
    old, kept = pr["assigned_reviewers"]

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr1", "old_user_id": old}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["replaced_by"] not in {"A", old, kept}
    assert data["pr"]["assigned_reviewers"] == [data["replaced_by"], kept]


async def test_reassign_errors(client):
    await _add_team(client, "engineering", "A", "B", "C")
    await _create_pr(client, "pr1", "A")

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr1", "old_user_id": "A"}
    )
    _assert_error(response, 409, "NOT_ASSIGNED")

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr1", "old_user_id": "B"}
    )
    _assert_error(response, 409, "NO_CANDIDATE")

    await client.post("/pullRequest/merge", json={"pull_request_id": "pr1"})
    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr1", "old_user_id": "B"}
    )
    _assert_error(response, 409, "PR_MERGED")

    response = await client.post(
        "/pullRequest/reassign", json={"pull_request_id": "missing", "old_user_id": "B"}
    )
    _assert_error(response, 404, "NOT_FOUND")


async def test_set_is_active_requires_admin(client):
    await _add_team(client, "backend", "u1")
    payload = {"user_id": "u1", "is_active": False}

    _assert_error(await client.post("/users/setIsActive", json=payload), 401, "UNAUTHORIZED")
    response = await client.post(
        "/users/setIsActive", json=payload, headers={"Authorization": "Bearer wrong"}
    )
    _assert_error(response, 401, "UNAUTHORIZED")

    response = await client.post("/users/setIsActive", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["user"] == {
        "user_id": "u1",
        "username": "user-u1",
        "team_name": "backend",
        "is_active": False,
    }

    response = await client.post(
        "/users/setIsActive", json={"user_id": "ghost", "is_active": True}, headers=ADMIN_HEADERS
    )
    _assert_error(response, 404, "NOT_FOUND")


async def test_get_user_reviews(client):
    await _add_team(client, "engineering", "A", "B")
    await _create_pr(client, "pr1", "A")

    response = await client.get("/users/getReview", params={"user_id": "B"})

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "B"
    assert data["pull_requests"] == [
        {"pull_request_id": "pr1", "pull_request_name": "feat", "author_id": "A", "status": "OPEN"}
    ]

    response = await client.get("/users/getReview", params={"user_id": "ghost"})
    _assert_error(response, 404, "NOT_FOUND")


async def test_deactivate_team_members(client):
    await _add_team(client, "alpha", "A", "B", "C")
    await _create_pr(client, "pr1", "A")

    response = await client.post("/team/deactivateMembers", json={"team_name": "alpha"})
    _assert_error(response, 401, "UNAUTHORIZED")

    response = await client.post(
        "/team/deactivateMembers", json={"team_name": "alpha"}, headers=ADMIN_HEADERS
    )
    assert response.status_code == 200
    data = response.json()
    assert data["deactivated_count"] == 3
    assert data["reassigned_prs"] == 2
    assert sorted(data["user_ids"]) == ["A", "B", "C"]
    assert data["skipped_prs"] == []

    team = (await client.get("/team/get", params={"team_name": "alpha"})).json()
    assert not any(m["is_active"] for m in team["members"])

    response = await client.post(
        "/team/deactivateMembers", json={"team_name": "missing"}, headers=ADMIN_HEADERS
    )
    _assert_error(response, 404, "NOT_FOUND")


async def test_statistics(client):
    await _add_team(client, "engineering", "A", "B")
    await _create_pr(client, "pr1", "A")

    response = await client.get("/statistics")

    assert response.status_code == 200
    data = response.json()
    assert data["total_prs"] == 1
    assert data["open_prs"] == 1
    assert data["assignments_by_pr"] == {"pr1": 1}
    assert data["assignments_by_user"] == {"user-A": 0, "user-B": 1}


async def test_store_errors_are_internal(app, client):
    class BrokenStatistics:
        async def get_statistics(self):
            raise StoreError("database unavailable")

    app.dependency_overrides[get_statistics_service] = lambda: BrokenStatistics()

    response = await client.get("/statistics")

    _assert_error(response, 500, "INTERNAL_ERROR")
