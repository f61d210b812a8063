"""
Wire shapes.

* Serializable* models: the camelCase JSON kept in the local store (and nested inside remote rows).
* *Row models: the snake_case rows of the remote `games` / `active_games` resources.

Timestamps are integer milliseconds since epoch, enums travel as their names.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.core.shared_types import BallColor, DishType, GameMode

logger = logging.getLogger(__name__)

DISH_TYPE_NAMES = frozenset(dish.value for dish in DishType)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- LOCAL STORE SHAPES ---
class SerializableFrame(WireModel):
    timestamp: int
    player: str
    score_change: int
    player_one_score: int
    player_two_score: int
    dish_type: Optional[DishType] = None

    @field_validator("dish_type", mode="before")
    @classmethod
    def drop_unknown_dish_type(cls, value: Any) -> Any:
        """An unrecognized tag is treated as absent instead of rejecting the whole record."""
        if value is None or value == "" or isinstance(value, DishType):
            return value or None
        if not isinstance(value, str) or value not in DISH_TYPE_NAMES:
            logger.warning("Ignoring unknown dishType %r", value)
            return None
        return value


class SerializableSet(WireModel):
    set_number: int
    player_one_score: int
    player_two_score: int
    winner: Optional[str]
    frames: list[SerializableFrame] = Field(default_factory=list)


class SerializableGame(WireModel):
    id: str
    player_one_name: str
    player_two_name: str
    player_one_score: int
    player_two_score: int
    target_score: int
    game_mode: GameMode
    winner: Optional[str]
    date: int
    start_time: int
    end_time: int
    frame_history: list[SerializableFrame] = Field(default_factory=list)
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    sets: list[SerializableSet] = Field(default_factory=list)
    break_player: Optional[str] = None


class SerializableActiveGame(WireModel):
    id: str
    player_one_name: str
    player_two_name: str
    player_one_score: int
    player_two_score: int
    player_one_games_won: int = 0
    player_two_games_won: int = 0
    target_score: int
    game_mode: GameMode
    start_time: int
    frame_history: list[SerializableFrame] = Field(default_factory=list)
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    completed_sets: list[SerializableSet] = Field(default_factory=list)
    break_player: Optional[str] = None
    player_one_color: Optional[BallColor] = None
    player_two_color: Optional[BallColor] = None


# --- REMOTE ROWS ---
class GameRow(BaseModel):
    id: str
    user_id: Optional[str] = None
    player_one_name: str
    player_two_name: str
    player_one_score: int
    player_two_score: int
    target_score: int
    game_mode: GameMode
    winner: Optional[str]
    date: int
    start_time: int
    end_time: int
    frame_history: list[SerializableFrame] = Field(default_factory=list)
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    sets: list[SerializableSet] = Field(default_factory=list)
    break_player: Optional[str] = None


class ActiveGameRow(BaseModel):
    id: str
    user_id: Optional[str] = None
    player_one_name: str
    player_two_name: str
    player_one_score: int
    player_two_score: int
    player_one_games_won: int = 0
    player_two_games_won: int = 0
    target_score: int
    game_mode: GameMode
    start_time: int
    frame_history: list[SerializableFrame] = Field(default_factory=list)
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    completed_sets: list[SerializableSet] = Field(default_factory=list)
    break_player: Optional[str] = None
    player_one_color: Optional[BallColor] = None
    player_two_color: Optional[BallColor] = None


# --- RESPONSE MODELS ---
class ErrorResponse(BaseModel):
    """Error body of the remote service (PostgREST style)."""

    code: str
    message: str
    details: Optional[str] = None
