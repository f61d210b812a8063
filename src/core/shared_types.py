"""
Type definitions used across layers
"""

from enum import StrEnum


class GameMode(StrEnum):
    RACE_TO = "RACE_TO"
    FIRST_TO = "FIRST_TO"
    BEST_OF = "BEST_OF"
    FREE_PLAY = "FREE_PLAY"
    # --- NOTE Killer matches can be stored and listed, but the engine has no live scoring rules for them.
    KILLER = "KILLER"

    @property
    def display_name(self) -> str:
        return GAME_MODE_DISPLAY_NAMES[self]


GAME_MODE_DISPLAY_NAMES: dict[GameMode, str] = {
    GameMode.RACE_TO: "Race to",
    GameMode.FIRST_TO: "Sets of",
    GameMode.BEST_OF: "Best of",
    GameMode.FREE_PLAY: "Free Play",
    GameMode.KILLER: "Killer",
}


class DishType(StrEnum):
    """Classification tag of a Frame."""

    BREAK_DISH = "BREAK_DISH"
    REVERSE_DISH = "REVERSE_DISH"
    MISS = "MISS"
    TRICK_SHOT_BLACK = "TRICK_SHOT_BLACK"


class BallColor(StrEnum):
    RED = "RED"
    YELLOW = "YELLOW"
    FOUL_BREAK = "FOUL_BREAK"


class Side(StrEnum):
    """Seat of a player at the scoreboard."""

    ONE = "one"
    TWO = "two"
