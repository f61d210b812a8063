"""Implementation of GameStore against the remote REST service (see src/api/routes.py), using httpx."""

import logging
from typing import Any, Callable, Optional

import httpx

from src.api.models import ActiveGameRow, ErrorResponse, GameRow
from src.core.config import Settings
from src.core.exceptions import (
    TRANSPORT_CODE,
    NotAuthenticatedError,
    RemoteStoreError,
    RepositoryError,
)
from src.core.models import ActiveGame, Game
from src.db.serializer import (
    active_game_from_wire,
    active_game_to_row,
    game_from_wire,
    game_to_row,
    parse_row,
)

logger = logging.getLogger(__name__)

# Hands out the bearer token of the signed-in user (None when signed out).
CredentialProvider = Callable[[], Optional[str]]


class RemoteStore:
    """
    Data stored by the remote service, scoped server-side to the caller's identity.
    ---

    * every call needs a bearer credential; without one, writes raise NotAuthenticatedError
    * reads degrade to an empty result on any failure (logged), so a backend outage reads as "no history"
    * writes raise RemoteStoreError carrying the service's error code and HTTP status
    """

    def __init__(self, client: httpx.AsyncClient, credentials: CredentialProvider) -> None:
        self.client = client
        self.credentials = credentials

    @classmethod
    def from_settings(cls, settings: Settings, credentials: CredentialProvider) -> "RemoteStore":
        client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers={"Accept": "application/json"},
            timeout=settings.api_timeout,
        )
        return cls(client, credentials)

    async def aclose(self) -> None:
        await self.client.aclose()

    # --- READS ---
    async def get_past_games(self) -> list[Game]:
        try:
            rows = await self._request("GET", "/games")
            games = [game_from_wire(parse_row(GameRow, row)) for row in rows or []]
        except RepositoryError as e:
            logger.warning("Could not load past games from the remote store: %s", e)
            return []
        return sorted(games, key=lambda g: g.date, reverse=True)

    async def get_active_game(self) -> Optional[ActiveGame]:
        try:
            rows = await self._request("GET", "/active_games")
            if not rows:
                return None
            return active_game_from_wire(parse_row(ActiveGameRow, rows[0]))
        except RepositoryError as e:
            logger.warning("Could not load the active game from the remote store: %s", e)
            return None

    # --- WRITES ---
    async def add_game(self, game: Game) -> None:
        payload = game_to_row(game).model_dump(mode="json", by_alias=True, exclude={"user_id"})
        await self._request("POST", "/games", json=payload)

    async def delete_game(self, game_id: str) -> None:
        await self._request("DELETE", f"/games/{game_id}")

    async def save_active_game(self, game: Optional[ActiveGame]) -> None:
        if game is None:
            await self._request("DELETE", "/active_games")
            return
        payload = active_game_to_row(game).model_dump(
            mode="json", by_alias=True, exclude={"user_id"}
        )
        await self._request("PUT", "/active_games", json=payload)

    # -- Internal helpers --
    def _auth_headers(self) -> dict[str, str]:
        token = self.credentials()
        if not token:
            raise NotAuthenticatedError()
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """Send the request and return the decoded body (None for empty responses)."""
        headers = self._auth_headers()
        try:
            response = await self.client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {path} failed: {e}", code=TRANSPORT_CODE) from e

        if response.is_error:
            raise self._to_error(response)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteStoreError(
                f"{method} {path} returned a body that is not JSON",
                status=response.status_code,
            ) from e

    def _to_error(self, response: httpx.Response) -> RemoteStoreError:
        try:
            body = ErrorResponse.model_validate(response.json())
        except ValueError:
            return RemoteStoreError(
                response.text or response.reason_phrase, status=response.status_code
            )
        return RemoteStoreError(body.message, code=body.code, status=response.status_code)
