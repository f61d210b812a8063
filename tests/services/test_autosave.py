import asyncio
import logging

import pytest

from src.db.gateway import PersistenceGateway
from src.services.autosave import AutoSaver
from tests.factories import InMemoryStore, make_active_game


@pytest.fixture
def local() -> InMemoryStore:
    return InMemoryStore("local")


@pytest.fixture
def remote() -> InMemoryStore:
    return InMemoryStore("remote")


@pytest.fixture
def saver(local: InMemoryStore, remote: InMemoryStore) -> AutoSaver:
    return AutoSaver(PersistenceGateway(local, remote))


def test_pending_snapshot_is_replaced_by_newer_one(saver: AutoSaver, local: InMemoryStore) -> None:
    """While a write is in flight only the latest snapshot is kept; writes land in issue order."""
    local.save_delay = 0.01
    first, second, third = (make_active_game(player_one_score=n) for n in (1, 2, 3))

    async def scenario() -> None:
        saver.submit(first)
        await asyncio.sleep(0)  # first write starts
        saver.submit(second)
        saver.submit(third)
        await saver.flush()

    asyncio.run(scenario())
    assert local.saves == [first, third]
    assert local.active_game == third
    assert (saver.issued, saver.written) == (3, 3)
    assert saver.idle


def test_clearing_goes_through_the_same_queue(saver: AutoSaver, local: InMemoryStore) -> None:
    local.save_delay = 0.01

    async def scenario() -> None:
        saver.submit(make_active_game())
        await asyncio.sleep(0)
        saver.submit(None)
        await saver.flush()

    asyncio.run(scenario())
    assert local.saves[-1] is None
    assert local.active_game is None


def test_write_keeps_route_of_issue_time(
    saver: AutoSaver, local: InMemoryStore, remote: InMemoryStore
) -> None:
    async def scenario() -> None:
        saver.submit(make_active_game())
        saver.gateway.reconfigure(True)
        await saver.flush()

    asyncio.run(scenario())
    assert len(local.saves) == 1
    assert remote.saves == []


def test_failure_is_logged_not_raised(
    saver: AutoSaver, local: InMemoryStore, caplog: pytest.LogCaptureFixture
) -> None:
    local.save_error = OSError("disk full")

    async def scenario() -> None:
        saver.submit(make_active_game())
        await saver.flush()

    with caplog.at_level(logging.WARNING, logger="src.services.autosave"):
        asyncio.run(scenario())
    assert isinstance(saver.last_error, OSError)
    assert saver.written == 0
    assert "disk full" in caplog.text

    # Next snapshot is written normally.
    local.save_error = None
    asyncio.run(scenario())
    assert saver.written == 2


def test_submit_outside_event_loop_waits_for_flush(saver: AutoSaver, local: InMemoryStore) -> None:
    snapshot = make_active_game()
    saver.submit(snapshot)
    assert not saver.idle
    assert local.saves == []

    asyncio.run(saver.flush())
    assert local.saves == [snapshot]


def test_flush_without_writes_returns() -> None:
    saver = AutoSaver(PersistenceGateway(InMemoryStore(), InMemoryStore()))
    asyncio.run(saver.flush())
    assert saver.idle
