"""Implementation of GameStore on the device: JSON blobs under fixed keys, kept in a SQLAlchemy key / value table."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.core.exceptions import SerializationError
from src.core.models import ActiveGame, Game
from src.db.database import make_session_factory
from src.db.schema import DBLocalItem
from src.db.serializer import dump_active_game, dump_games, load_active_game, load_games

logger = logging.getLogger(__name__)

GAMES_KEY = "past_games"
ACTIVE_GAME_KEY = "active_game"


class KeyValueStorage:
    """getItem / setItem / removeItem over one table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            item = db.scalar(select(DBLocalItem).where(DBLocalItem.key == key))
            return item.value if item else None

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            item = db.get(DBLocalItem, key)
            if item is None:
                db.add(DBLocalItem(key=key, value=value))
            else:
                item.value = value
            db.commit()

    def remove_item(self, key: str) -> None:
        with self.session_factory() as db:
            item = db.get(DBLocalItem, key)
            if item is not None:
                db.delete(item)
                db.commit()


class LocalStore:
    """
    Data stored on the device.
    ---

    Reads never fail: an unreadable blob is logged and read as "nothing stored".
    Writes propagate their errors to the caller.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalStore":
        return cls(KeyValueStorage(make_session_factory(settings.local_db_url)))

    async def get_past_games(self) -> list[Game]:
        """Newest first, like the remote store."""
        return sorted(self._read_games(), key=lambda g: g.date, reverse=True)

    async def add_game(self, game: Game) -> None:
        games = self._read_games()
        games.append(game)
        self.storage.set_item(GAMES_KEY, dump_games(games))

    async def delete_game(self, game_id: str) -> None:
        games = [g for g in self._read_games() if g.id != game_id]
        self.storage.set_item(GAMES_KEY, dump_games(games))

    async def get_active_game(self) -> Optional[ActiveGame]:
        text = self.storage.get_item(ACTIVE_GAME_KEY)
        if not text:
            return None
        try:
            return load_active_game(text)
        except SerializationError:
            logger.warning("Stored active game is unreadable; ignoring it", exc_info=True)
            return None

    async def save_active_game(self, game: Optional[ActiveGame]) -> None:
        if game is None:
            self.storage.remove_item(ACTIVE_GAME_KEY)
        else:
            self.storage.set_item(ACTIVE_GAME_KEY, dump_active_game(game))

    def _read_games(self) -> list[Game]:
        text = self.storage.get_item(GAMES_KEY)
        if not text or text == "[]":
            return []
        try:
            return load_games(text)
        except SerializationError:
            logger.warning("Stored game history is unreadable; reading it as empty", exc_info=True)
            return []
