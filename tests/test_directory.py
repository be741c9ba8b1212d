"""Tests for the directory service."""
import pytest

from prreviewer.core.errors import NotFoundError, TeamExistsError
from prreviewer.core.models import PullRequestStatus, TeamMember


async def test_create_and_get_team(directory, make_team):
    created = await make_team("backend", "u2", "u1", ("u3", False))

    assert created.team_name == "backend"
    assert [m.user_id for m in created.members] == ["u2", "u1", "u3"]

    team = await directory.get_team("backend")
    assert [m.user_id for m in team.members] == ["u1", "u2", "u3"]
    assert [m.is_active for m in team.members] == [True, True, False]


async def test_create_existing_team(make_team):
    await make_team("backend", "u1")

    with pytest.raises(TeamExistsError):
        await make_team("backend", "u2")


async def test_failed_create_leaves_users_alone(directory, make_team):
    await make_team("backend", "u1")

    with pytest.raises(TeamExistsError):
        await make_team("backend", "u9")

    with pytest.raises(NotFoundError):
        await directory.set_is_active("u9", True)


async def test_duplicate_member_last_entry_wins(directory):
    team = await directory.create_team(
        "backend",
        [
            TeamMember(user_id="u1", username="first"),
            TeamMember(user_id="u1", username="second", is_active=False),
        ],
    )

    assert team.members == [TeamMember(user_id="u1", username="second", is_active=False)]


async def test_existing_user_moves_to_new_team(directory, make_team, load_user):
    await make_team("backend", "u1", "u2")
    await directory.create_team("frontend", [TeamMember(user_id="u1", username="renamed")])

    user = await load_user("u1")
    assert user.team_name == "frontend"
    assert user.username == "renamed"
    assert [m.user_id for m in (await directory.get_team("backend")).members] == ["u2"]


async def test_get_unknown_team(directory):
    with pytest.raises(NotFoundError):
        await directory.get_team("nope")


async def test_set_is_active(directory, make_team, load_user):
    await make_team("backend", "u1")

    user = await directory.set_is_active("u1", False)

    assert user.is_active is False
    assert (await load_user("u1")).is_active is False


async def test_set_is_active_unknown_user(directory):
    with pytest.raises(NotFoundError) as exc_info:
        await directory.set_is_active("ghost", False)

    assert exc_info.value.message == "user not found"


async def test_deactivating_user_keeps_existing_slots(directory, engine, make_team, load_pr):
    await make_team("backend", "A", "B")
    await engine.create_pull_request("pr1", "feat", "A")

    await directory.set_is_active("B", False)

    assert (await load_pr("pr1")).assigned_reviewers == ["B"]


async def test_get_user_reviews_newest_first(directory, engine, make_team):
    await make_team("backend", "A", "B")
    await engine.create_pull_request("pr1", "first", "A")
    await engine.create_pull_request("pr2", "second", "A")
    await engine.merge_pull_request("pr1")

    reviews = await directory.get_user_reviews("B")

    assert [r.pull_request_id for r in reviews] == ["pr2", "pr1"]
    assert reviews[1].status == PullRequestStatus.MERGED
    assert reviews[0].author_id == "A"


async def test_get_user_reviews_empty_and_unknown(directory, make_team):
    await make_team("backend", "A")

    assert await directory.get_user_reviews("A") == []
    with pytest.raises(NotFoundError):
        await directory.get_user_reviews("ghost")
