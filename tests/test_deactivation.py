"""Tests for bulk team deactivation."""
import logging
import time

import pytest

from prreviewer.core.errors import NotFoundError
from prreviewer.core.storage import StoreError
from prreviewer.core.storage.repositories import PullRequestRepository


async def test_deactivates_every_active_member(engine, make_team, load_user):
    await make_team("alpha", "A", "B", "C", ("D", False))

    result = await engine.deactivate_team_members("alpha")

    assert result.deactivated_count == 3
    assert sorted(result.user_ids) == ["A", "B", "C"]
    assert result.skipped_pull_requests == []
    for user_id in ("A", "B", "C", "D"):
        assert (await load_user(user_id)).is_active is False


async def test_only_open_pull_requests_are_touched(engine, make_team, load_pr):
    await make_team("alpha", "A", "B", "C")
    await engine.create_pull_request("open-pr", "feat", "A")
    merged = await engine.create_pull_request("merged-pr", "fix", "A")
    await engine.merge_pull_request("merged-pr")

    result = await engine.deactivate_team_members("alpha")

    # B and C each release their slot on open-pr; nobody in alpha is left to take it
    assert result.reassigned_count == 2
    assert (await load_pr("open-pr")).assigned_reviewers == []
    assert (await load_pr("merged-pr")).assigned_reviewers == merged.assigned_reviewers


async def test_other_teams_are_untouched(engine, make_team, load_pr, load_user):
    await make_team("alpha", "A", "B", "C")
    await make_team("beta", "X", "Y", "Z")
    beta_pr = await engine.create_pull_request("beta-pr", "feat", "X")

    result = await engine.deactivate_team_members("alpha")

    assert result.reassigned_count == 0
    assert (await load_user("X")).is_active is True
    assert (await load_pr("beta-pr")).assigned_reviewers == beta_pr.assigned_reviewers


async def test_slot_removed_when_team_has_no_candidate(engine, make_team, load_pr):
    await make_team("alpha", "A", "B", "C")
    await engine.create_pull_request("pr1", "feat", "A")
    # B moves to gamma, so only B's slot is released when gamma is deactivated
    await make_team("gamma", "B", "G")

    result = await engine.deactivate_team_members("gamma")

    pr = await load_pr("pr1")
    assert result.deactivated_count == 2
    assert result.reassigned_count == 1
    assert pr.assigned_reviewers == ["C"]


async def test_already_inactive_team(engine, make_team):
    await make_team("quiet", ("Q", False))

    result = await engine.deactivate_team_members("quiet")

    assert result.deactivated_count == 0
    assert result.reassigned_count == 0
    assert result.user_ids == []


async def test_unknown_team(engine):
    with pytest.raises(NotFoundError) as exc_info:
        await engine.deactivate_team_members("missing")

    assert exc_info.value.message == "team not found"


async def test_store_failure_skips_only_that_pull_request(
    engine, make_team, load_pr, load_user, monkeypatch, caplog
):
    await make_team("alpha", "A", "B", "C")
    await engine.create_pull_request("pr-good", "feat", "A")
    bad = await engine.create_pull_request("pr-bad", "fix", "A")

    original_update = PullRequestRepository.update

    async def flaky_update(self, pull_request):
        if pull_request.pull_request_id == "pr-bad":
            raise StoreError("simulated write failure")
        return await original_update(self, pull_request)

    monkeypatch.setattr(PullRequestRepository, "update", flaky_update)

    with caplog.at_level(logging.WARNING, logger="prreviewer.core.assignment.engine"):
        result = await engine.deactivate_team_members("alpha")

    assert result.deactivated_count == 3
    assert result.reassigned_count == 2
    assert result.skipped_pull_requests == ["pr-bad"]

    # The rest of the operation still committed
    assert (await load_user("B")).is_active is False
    assert (await load_pr("pr-good")).assigned_reviewers == []
    stored_bad = await load_pr("pr-bad")
    assert stored_bad.assigned_reviewers == bad.assigned_reviewers
    assert stored_bad.version == bad.version

    skipped = [r for r in caplog.records if getattr(r, "pull_request_id", None) == "pr-bad"]
    assert skipped
    assert all(r.team_name == "alpha" for r in skipped)
    assert all(r.error == "StoreError" for r in skipped)


async def test_deactivation_is_fast(engine, make_team):
    await make_team("warmup", "W1", "W2", "W3")
    await engine.create_pull_request("warmup-pr", "warm", "W1")
    await engine.deactivate_team_members("warmup")

    await make_team("trio", "A", "B", "C")
    await engine.create_pull_request("pr1", "feat", "A")

    started = time.perf_counter()
    result = await engine.deactivate_team_members("trio")
    elapsed = time.perf_counter() - started

    assert result.deactivated_count == 3
    assert elapsed < 0.1
