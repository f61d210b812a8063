"""
Routing of every persistence call to either the local store or the remote store.
----

The gateway is reconfigured by the authentication state of the user and is otherwise stateless between calls.
"""

import logging
from enum import StrEnum
from typing import Optional

from src.core.exceptions import RepositoryError, is_fallback_error
from src.core.models import ActiveGame, Game
from src.db.repository import GameStore

logger = logging.getLogger(__name__)


class Route(StrEnum):
    LOCAL = "local"
    REMOTE = "remote"


class PersistenceGateway:
    def __init__(self, local: GameStore, remote: GameStore, authenticated: bool = False) -> None:
        self.local = local
        self.remote = remote
        self.authenticated = authenticated

    def reconfigure(self, authenticated: bool) -> None:
        if authenticated != self.authenticated:
            logger.info("Persistence routed to %s store", Route.REMOTE if authenticated else Route.LOCAL)
        self.authenticated = authenticated

    @property
    def route(self) -> Route:
        """Decision in effect right now. Writes issued earlier carry their own."""
        return Route.REMOTE if self.authenticated else Route.LOCAL

    async def get_active_game(self) -> Optional[ActiveGame]:
        return await self._store(self.route).get_active_game()

    async def get_past_games(self) -> list[Game]:
        return await self._store(self.route).get_past_games()

    async def add_game(self, game: Game, route: Optional[Route] = None) -> None:
        await self._store(route or self.route).add_game(game)

    async def delete_game(self, game_id: str, route: Optional[Route] = None) -> None:
        await self._store(route or self.route).delete_game(game_id)

    async def save_active_game(
        self, game: Optional[ActiveGame], route: Optional[Route] = None
    ) -> None:
        """
        Store (or clear, with None) the in-progress match.
        ---

        A remote write that cannot reach the service, or is rejected for authentication / access-policy / permission
        reasons, is retried against the local store.
        Any other remote failure is raised.
        """
        route = route or self.route
        if route == Route.LOCAL:
            await self.local.save_active_game(game)
            return

        try:
            await self.remote.save_active_game(game)
        except RepositoryError as e:
            if not is_fallback_error(e):
                logger.error("Remote save of the active game failed: %s", e)
                raise
            logger.warning("Remote save of the active game rejected (%s); saving locally", e)
            await self.local.save_active_game(game)

    def _store(self, route: Route) -> GameStore:
        return self.remote if route == Route.REMOTE else self.local
