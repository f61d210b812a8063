"""Routes of the remote service: the `games` and `active_games` resources of the signed-in user."""

from typing import Generator

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from src.api.auth import get_current_user
from src.api.models import ActiveGameRow, GameRow
from src.db.sql_repository import SQLGameRepository

router = APIRouter()


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> SQLGameRepository:
    return SQLGameRepository(db)


# --- games ---
@router.get("/games", response_model=list[GameRow])
def list_games(
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> list[GameRow]:
    return repo.list_games(user_id)


@router.post("/games", response_model=GameRow, status_code=status.HTTP_201_CREATED)
def add_game(
    row: GameRow,
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> GameRow:
    return repo.add_game(user_id, row)


@router.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(
    game_id: str,
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> Response:
    # Deleting something that is not there is not an error (same as a filtered delete).
    repo.delete_game(user_id, game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- active_games ---
@router.get("/active_games", response_model=list[ActiveGameRow])
def get_active_games(
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> list[ActiveGameRow]:
    """Zero or one row."""
    row = repo.get_active_game(user_id)
    return [row] if row else []


@router.put("/active_games", response_model=ActiveGameRow)
def upsert_active_game(
    row: ActiveGameRow,
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> ActiveGameRow:
    return repo.upsert_active_game(user_id, row)


@router.delete("/active_games", status_code=status.HTTP_204_NO_CONTENT)
def delete_active_game(
    user_id: str = Depends(get_current_user),
    repo: SQLGameRepository = Depends(get_repository),
) -> Response:
    repo.delete_active_game(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
