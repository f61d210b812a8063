import asyncio
import json
import logging

import pytest
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import ActiveGame, Game
from src.db.local_store import ACTIVE_GAME_KEY, GAMES_KEY, KeyValueStorage, LocalStore
from tests.factories import make_game


@pytest.fixture
def storage(session_factory: sessionmaker[Session]) -> KeyValueStorage:
    return KeyValueStorage(session_factory)


@pytest.fixture
def local_store(storage: KeyValueStorage) -> LocalStore:
    return LocalStore(storage)


# -- Key / value storage --
def test_key_value_storage(storage: KeyValueStorage) -> None:
    assert storage.get_item("k") is None
    storage.set_item("k", "one")
    storage.set_item("k", "two")
    assert storage.get_item("k") == "two"
    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


# -- Completed games --
def test_empty_history(local_store: LocalStore) -> None:
    assert asyncio.run(local_store.get_past_games()) == []


def test_add_and_delete_games(local_store: LocalStore, storage: KeyValueStorage) -> None:
    async def scenario() -> list[Game]:
        await local_store.add_game(make_game(game_id="old", days_ago=2))
        await local_store.add_game(make_game(game_id="new"))
        await local_store.add_game(make_game(game_id="gone", days_ago=1))
        await local_store.delete_game("gone")
        await local_store.delete_game("never-there")
        return await local_store.get_past_games()

    games = asyncio.run(scenario())
    assert [g.id for g in games] == ["new", "old"]
    assert storage.get_item(GAMES_KEY) is not None


def test_corrupt_history_reads_as_empty(
    local_store: LocalStore, storage: KeyValueStorage, caplog: pytest.LogCaptureFixture
) -> None:
    storage.set_item(GAMES_KEY, "[{broken")
    with caplog.at_level(logging.WARNING, logger="src.db.local_store"):
        assert asyncio.run(local_store.get_past_games()) == []
    assert "unreadable" in caplog.text


# -- Active game --
def test_save_load_and_clear_active_game(
    local_store: LocalStore, storage: KeyValueStorage, sample_active_game: ActiveGame
) -> None:
    asyncio.run(local_store.save_active_game(sample_active_game))
    assert asyncio.run(local_store.get_active_game()) == sample_active_game

    asyncio.run(local_store.save_active_game(None))
    assert storage.get_item(ACTIVE_GAME_KEY) is None
    assert asyncio.run(local_store.get_active_game()) is None


def test_corrupt_active_game_reads_as_none(
    local_store: LocalStore, storage: KeyValueStorage
) -> None:
    storage.set_item(ACTIVE_GAME_KEY, "not json at all")
    assert asyncio.run(local_store.get_active_game()) is None


def test_malformed_tag_in_stored_history_is_dropped(
    local_store: LocalStore, storage: KeyValueStorage, sample_game: Game
) -> None:
    """A tag of the wrong shape only loses the tag, never the history."""
    asyncio.run(local_store.add_game(sample_game))
    stored = json.loads(storage.get_item(GAMES_KEY) or "[]")
    stored[0]["frameHistory"][0]["dishType"] = {"x": 1}
    storage.set_item(GAMES_KEY, json.dumps(stored))

    [game] = asyncio.run(local_store.get_past_games())
    assert game.frame_history[0].dish_type is None
    assert len(game.frame_history) == len(sample_game.frame_history)
