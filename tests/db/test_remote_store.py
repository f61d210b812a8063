import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import httpx
import pytest
from fastapi import FastAPI

from src.core.exceptions import NotAuthenticatedError, RemoteStoreError, is_fallback_error
from src.core.models import ActiveGame, Game
from src.db.remote_store import RemoteStore
from tests.factories import make_game

T = TypeVar("T")


def run_against(
    transport: httpx.AsyncBaseTransport,
    token: Optional[str],
    scenario: Callable[[RemoteStore], Awaitable[T]],
) -> T:
    """Run the scenario with a RemoteStore whose client lives in the same event loop."""

    async def main() -> T:
        client = httpx.AsyncClient(transport=transport, base_url="http://testserver")
        store = RemoteStore(client, lambda: token)
        try:
            return await scenario(store)
        finally:
            await store.aclose()

    return asyncio.run(main())


def refusing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


# -- Against the service --
def test_games_round_trip(app: FastAPI, sample_game: Game) -> None:
    async def scenario(store: RemoteStore) -> list[Game]:
        await store.add_game(make_game(game_id="older", days_ago=1))
        await store.add_game(sample_game)
        return await store.get_past_games()

    games = run_against(httpx.ASGITransport(app=app), "token-alice", scenario)
    assert [g.id for g in games] == ["game-1", "older"]
    assert games[0] == sample_game


def test_delete_game(app: FastAPI, sample_game: Game) -> None:
    async def scenario(store: RemoteStore) -> list[Game]:
        await store.add_game(sample_game)
        await store.delete_game(sample_game.id)
        return await store.get_past_games()

    assert run_against(httpx.ASGITransport(app=app), "token-alice", scenario) == []


def test_active_game_round_trip(app: FastAPI, sample_active_game: ActiveGame) -> None:
    async def scenario(store: RemoteStore) -> tuple[Optional[ActiveGame], Optional[ActiveGame]]:
        await store.save_active_game(sample_active_game)
        saved = await store.get_active_game()
        await store.save_active_game(None)
        return saved, await store.get_active_game()

    saved, cleared = run_against(httpx.ASGITransport(app=app), "token-alice", scenario)
    assert saved == sample_active_game
    assert cleared is None


def test_duplicate_game_raises_with_code(app: FastAPI, sample_game: Game) -> None:
    async def scenario(store: RemoteStore) -> None:
        await store.add_game(sample_game)
        await store.add_game(sample_game)

    with pytest.raises(RemoteStoreError) as excinfo:
        run_against(httpx.ASGITransport(app=app), "token-alice", scenario)
    assert excinfo.value.code == "23505"
    assert excinfo.value.status == 409
    assert not is_fallback_error(excinfo.value)


def test_rejected_credential_is_a_fallback_error(
    app: FastAPI, sample_active_game: ActiveGame
) -> None:
    async def scenario(store: RemoteStore) -> None:
        await store.save_active_game(sample_active_game)

    with pytest.raises(RemoteStoreError) as excinfo:
        run_against(httpx.ASGITransport(app=app), "expired-token", scenario)
    assert excinfo.value.status == 401
    assert excinfo.value.code == "PGRST301"
    assert is_fallback_error(excinfo.value)


# -- Without credential --
def test_write_without_credential(app: FastAPI, sample_game: Game) -> None:
    async def scenario(store: RemoteStore) -> None:
        await store.add_game(sample_game)

    with pytest.raises(NotAuthenticatedError):
        run_against(httpx.ASGITransport(app=app), None, scenario)


def test_reads_without_credential_are_empty(app: FastAPI) -> None:
    async def scenario(store: RemoteStore) -> tuple[list[Game], Optional[ActiveGame]]:
        return await store.get_past_games(), await store.get_active_game()

    assert run_against(httpx.ASGITransport(app=app), None, scenario) == ([], None)


# -- Backend unavailable --
def test_reads_degrade_to_empty_when_unreachable() -> None:
    async def scenario(store: RemoteStore) -> tuple[list[Game], Optional[ActiveGame]]:
        return await store.get_past_games(), await store.get_active_game()

    assert run_against(refusing_transport(), "token-alice", scenario) == ([], None)


def test_writes_raise_when_unreachable(sample_game: Game) -> None:
    async def scenario(store: RemoteStore) -> None:
        await store.add_game(sample_game)

    with pytest.raises(RemoteStoreError) as excinfo:
        run_against(refusing_transport(), "token-alice", scenario)
    assert excinfo.value.code == "transport"
    assert is_fallback_error(excinfo.value)


def test_error_without_json_body() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))

    async def scenario(store: RemoteStore) -> None:
        await store.delete_game("game-1")

    with pytest.raises(RemoteStoreError) as excinfo:
        run_against(transport, "token-alice", scenario)
    assert excinfo.value.status == 502
    assert excinfo.value.message == "Bad gateway"
