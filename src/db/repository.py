"""Protocol repository: what the gateway expects from a store (the device's local storage or the remote service)."""

from typing import Optional, Protocol

from src.core.models import ActiveGame, Game


class GameStore(Protocol):
    """Persistence of the completed games + the single in-progress match of the user."""

    async def get_active_game(self) -> Optional[ActiveGame]:
        """The in-progress match, if there is one."""
        ...

    async def save_active_game(self, game: Optional[ActiveGame]) -> None:
        """Store the in-progress match. None clears it."""
        ...

    async def get_past_games(self) -> list[Game]:
        """All completed games."""
        ...

    async def add_game(self, game: Game) -> None:
        """Store a completed game."""
        ...

    async def delete_game(self, game_id: str) -> None:
        """Remove a completed game's record."""
        ...
