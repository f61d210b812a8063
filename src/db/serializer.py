"""
Conversion between the domain records (src/core/models.py) and their storage-safe shapes (src/api/models.py).

Used by both the local store (camelCase JSON) and the remote store (snake_case rows).
"""

from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from src.api.models import (
    ActiveGameRow,
    GameRow,
    SerializableActiveGame,
    SerializableFrame,
    SerializableGame,
    SerializableSet,
)
from src.core.clock import from_millis, to_millis
from src.core.exceptions import SerializationError
from src.core.models import ActiveGame, Frame, Game, MatchSet

WireT = TypeVar("WireT", bound=BaseModel)

_GAMES_ADAPTER = TypeAdapter(list[SerializableGame])


# --- FRAMES / SETS ---
def frame_to_wire(frame: Frame) -> SerializableFrame:
    return SerializableFrame(
        timestamp=to_millis(frame.timestamp),
        player=frame.player,
        score_change=frame.score_change,
        player_one_score=frame.player_one_score,
        player_two_score=frame.player_two_score,
        dish_type=frame.dish_type,
    )


def frame_from_wire(frame: SerializableFrame) -> Frame:
    return Frame(
        timestamp=from_millis(frame.timestamp),
        player=frame.player,
        score_change=frame.score_change,
        player_one_score=frame.player_one_score,
        player_two_score=frame.player_two_score,
        dish_type=frame.dish_type,
    )


def set_to_wire(match_set: MatchSet) -> SerializableSet:
    return SerializableSet(
        set_number=match_set.set_number,
        player_one_score=match_set.player_one_score,
        player_two_score=match_set.player_two_score,
        winner=match_set.winner,
        frames=[frame_to_wire(f) for f in match_set.frames],
    )


def set_from_wire(match_set: SerializableSet) -> MatchSet:
    return MatchSet(
        set_number=match_set.set_number,
        player_one_score=match_set.player_one_score,
        player_two_score=match_set.player_two_score,
        winner=match_set.winner,
        frames=tuple(frame_from_wire(f) for f in match_set.frames),
    )


# --- COMPLETED GAMES ---
def game_to_wire(game: Game) -> SerializableGame:
    return SerializableGame(
        id=game.id,
        player_one_name=game.player_one_name,
        player_two_name=game.player_two_name,
        player_one_score=game.player_one_score,
        player_two_score=game.player_two_score,
        target_score=game.target_score,
        game_mode=game.game_mode,
        winner=game.winner,
        date=to_millis(game.date),
        start_time=to_millis(game.start_time),
        end_time=to_millis(game.end_time),
        frame_history=[frame_to_wire(f) for f in game.frame_history],
        player_one_sets_won=game.player_one_sets_won,
        player_two_sets_won=game.player_two_sets_won,
        sets=[set_to_wire(s) for s in game.sets],
        break_player=game.break_player,
    )


def game_from_wire(game: SerializableGame | GameRow) -> Game:
    """Both the local shape and the remote row carry the same fields."""
    return Game(
        id=game.id,
        player_one_name=game.player_one_name,
        player_two_name=game.player_two_name,
        player_one_score=game.player_one_score,
        player_two_score=game.player_two_score,
        target_score=game.target_score,
        game_mode=game.game_mode,
        winner=game.winner,
        date=from_millis(game.date),
        start_time=from_millis(game.start_time),
        end_time=from_millis(game.end_time),
        frame_history=tuple(frame_from_wire(f) for f in game.frame_history),
        player_one_sets_won=game.player_one_sets_won,
        player_two_sets_won=game.player_two_sets_won,
        sets=tuple(set_from_wire(s) for s in game.sets),
        break_player=game.break_player,
    )


def game_to_row(game: Game, user_id: str | None = None) -> GameRow:
    wire = game_to_wire(game)
    return GameRow(user_id=user_id, **dict(wire))


# --- ACTIVE GAME ---
def active_game_to_wire(game: ActiveGame) -> SerializableActiveGame:
    return SerializableActiveGame(
        id=game.id,
        player_one_name=game.player_one_name,
        player_two_name=game.player_two_name,
        player_one_score=game.player_one_score,
        player_two_score=game.player_two_score,
        player_one_games_won=game.player_one_games_won,
        player_two_games_won=game.player_two_games_won,
        target_score=game.target_score,
        game_mode=game.game_mode,
        start_time=to_millis(game.start_time),
        frame_history=[frame_to_wire(f) for f in game.frame_history],
        player_one_sets_won=game.player_one_sets_won,
        player_two_sets_won=game.player_two_sets_won,
        completed_sets=[set_to_wire(s) for s in game.completed_sets],
        break_player=game.break_player,
        player_one_color=game.player_one_color,
        player_two_color=game.player_two_color,
    )


def active_game_from_wire(game: SerializableActiveGame | ActiveGameRow) -> ActiveGame:
    return ActiveGame(
        id=game.id,
        player_one_name=game.player_one_name,
        player_two_name=game.player_two_name,
        player_one_score=game.player_one_score,
        player_two_score=game.player_two_score,
        player_one_games_won=game.player_one_games_won,
        player_two_games_won=game.player_two_games_won,
        target_score=game.target_score,
        game_mode=game.game_mode,
        start_time=from_millis(game.start_time),
        frame_history=[frame_from_wire(f) for f in game.frame_history],
        player_one_sets_won=game.player_one_sets_won,
        player_two_sets_won=game.player_two_sets_won,
        completed_sets=[set_from_wire(s) for s in game.completed_sets],
        break_player=game.break_player,
        player_one_color=game.player_one_color,
        player_two_color=game.player_two_color,
    )


def active_game_to_row(game: ActiveGame, user_id: str | None = None) -> ActiveGameRow:
    wire = active_game_to_wire(game)
    return ActiveGameRow(user_id=user_id, **dict(wire))


# --- JSON TEXT (local store values) ---
def dump_games(games: list[Game]) -> str:
    return _GAMES_ADAPTER.dump_json(
        [game_to_wire(g) for g in games], by_alias=True
    ).decode()


def load_games(text: str) -> list[Game]:
    """Raises SerializationError if the blob (or any game in it) cannot be read."""
    try:
        wires = _GAMES_ADAPTER.validate_json(text)
    except ValidationError as e:
        raise SerializationError(f"Stored game history is unreadable: {e}") from e
    return [game_from_wire(w) for w in wires]


def dump_active_game(game: ActiveGame) -> str:
    return active_game_to_wire(game).model_dump_json(by_alias=True)


def load_active_game(text: str) -> ActiveGame:
    wire = parse_json(SerializableActiveGame, text)
    return active_game_from_wire(wire)


# --- PARSING HELPERS ---
def parse_json(model: type[WireT], text: str) -> WireT:
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise SerializationError(f"Cannot read {model.__name__}: {e}") from e


def parse_row(model: type[WireT], data: object) -> WireT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SerializationError(f"Cannot read {model.__name__}: {e}") from e
