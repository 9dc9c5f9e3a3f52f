"""Tests for the generic (actor, target) toggle repository."""
import asyncio
from uuid import UUID

from causeconnect.db.database import AsyncSessionLocal
from causeconnect.models import Follow
from causeconnect.repositories.toggle_repo import ToggleRepository


def _run(steps):
    async def run():
        async with AsyncSessionLocal() as db:
            return await steps(ToggleRepository(Follow, "follower_id", "following_id", db))
    return asyncio.run(run())


def test_activate_is_idempotent(alice, bob):
    a, b = UUID(alice.id), UUID(bob.id)

    async def steps(repo):
        first = await repo.activate(a, b)
        second = await repo.activate(a, b)
        return first, second, await repo.count_for_target(b)

    assert _run(steps) == (True, False, 1)


def test_deactivate_reports_removal(alice, bob):
    a, b = UUID(alice.id), UUID(bob.id)

    async def steps(repo):
        missing = await repo.deactivate(a, b)
        await repo.activate(a, b)
        removed = await repo.deactivate(a, b)
        return missing, removed, await repo.exists(a, b)

    assert _run(steps) == (False, True, False)


def test_toggle_round_trip(alice, bob):
    a, b = UUID(alice.id), UUID(bob.id)

    async def steps(repo):
        states = [await repo.toggle(a, b) for _ in range(3)]
        return states, await repo.exists(a, b)

    assert _run(steps) == ([True, False, True], True)


def test_bulk_counts_and_viewer_state(alice, bob, carol):
    a, b, c = UUID(alice.id), UUID(bob.id), UUID(carol.id)

    async def steps(repo):
        await repo.activate(a, b)
        await repo.activate(c, b)
        await repo.activate(b, c)
        return (
            await repo.counts_for_targets([a, b, c]),
            await repo.targets_for_actor(a, [b, c]),
            await repo.count_for_actor(a),
            await repo.targets_for_actor(a, []),
        )

    counts, targets, following, empty = _run(steps)
    assert counts == {a: 0, b: 2, c: 1}
    assert targets == {b}
    assert following == 1
    assert empty == set()
