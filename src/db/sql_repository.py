"""Server side storage of the remote service, using SQLAlchemy. Every method is scoped to one user."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.models import ActiveGameRow, GameRow
from src.core.exceptions import DuplicateGameError
from src.db.schema import DBActiveGame, DBGame

_GAME_COLUMNS = tuple(name for name in GameRow.model_fields if name != "user_id")
_ACTIVE_GAME_COLUMNS = tuple(name for name in ActiveGameRow.model_fields if name != "user_id")


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    # --- games ---
    def list_games(self, user_id: str) -> list[GameRow]:
        """All completed games of the user, newest first."""
        query = (
            select(DBGame)
            .where(DBGame.user_id == user_id)
            .order_by(DBGame.date.desc(), DBGame.created_at.desc())
        )
        return [self._to_game_row(game_db) for game_db in self.db.scalars(query)]

    def add_game(self, user_id: str, row: GameRow) -> GameRow:
        if self.db.get(DBGame, row.id) is not None:
            raise DuplicateGameError(f"Game with id={row.id!r} already exists.")
        game_db = DBGame(user_id=user_id, **self._columns(row, _GAME_COLUMNS))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_game_row(game_db)

    def delete_game(self, user_id: str, game_id: str) -> Optional[GameRow]:
        """Remove a game's record. Returns None if the user has no game with that id."""
        query = select(DBGame).where(DBGame.id == game_id, DBGame.user_id == user_id)
        game_db = self.db.scalar(query)
        if not game_db:
            return None
        row = self._to_game_row(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return row

    # --- active game ---
    def get_active_game(self, user_id: str) -> Optional[ActiveGameRow]:
        active_db = self.db.get(DBActiveGame, user_id)
        if not active_db:
            return None
        return self._to_active_game_row(active_db)

    def upsert_active_game(self, user_id: str, row: ActiveGameRow) -> ActiveGameRow:
        """Insert, or merge the new values into the user's existing row."""
        values = self._columns(row, _ACTIVE_GAME_COLUMNS)
        active_db = self.db.get(DBActiveGame, user_id)
        if active_db is None:
            active_db = DBActiveGame(user_id=user_id, **values)
            self.db.add(active_db)
        else:
            for name, value in values.items():
                setattr(active_db, name, value)
        self.db.commit()
        self.db.refresh(active_db)
        return self._to_active_game_row(active_db)

    def delete_active_game(self, user_id: str) -> bool:
        active_db = self.db.get(DBActiveGame, user_id)
        if not active_db:
            return False
        self.db.delete(active_db)
        self.db.commit()
        return True

    # -- Internal helpers --
    @staticmethod
    def _columns(row: GameRow | ActiveGameRow, names: tuple[str, ...]) -> dict:
        """Row values as stored in the table: JSON-safe, nested frames keep their camelCase keys."""
        dumped = row.model_dump(mode="json", by_alias=True)
        return {name: dumped[name] for name in names}

    def _to_game_row(self, game_db: DBGame) -> GameRow:
        """Convert SQLAlchemy model to data transfer model."""
        data = {name: getattr(game_db, name) for name in _GAME_COLUMNS}
        return GameRow.model_validate({"user_id": game_db.user_id, **data})

    def _to_active_game_row(self, active_db: DBActiveGame) -> ActiveGameRow:
        data = {name: getattr(active_db, name) for name in _ACTIVE_GAME_COLUMNS}
        return ActiveGameRow.model_validate({"user_id": active_db.user_id, **data})
