"""
Boundary layer data model(s).

These records are what the scoring engine hands to the persistence layer and what the persistence layer gives back.
(Decouples the engine's working state from the shapes used by the local store, the remote service, and the API.)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.shared_types import BallColor, DishType, GameMode

# Type alias to make the records easier to read. Always the canonical (normalized) name.
PlayerName = str


@dataclass(frozen=True)
class Frame:
    """One scoring event. Scores are the cumulative pair AFTER applying score_change."""

    timestamp: datetime
    player: PlayerName
    score_change: int
    player_one_score: int
    player_two_score: int
    dish_type: Optional[DishType] = None


@dataclass(frozen=True)
class MatchSet:
    """A finalized set ("Sets of" mode only)."""

    set_number: int
    player_one_score: int
    player_two_score: int
    winner: Optional[PlayerName]
    frames: tuple[Frame, ...] = ()


@dataclass
class ActiveGame:
    """Snapshot of the match in progress. At most one exists per user."""

    id: str
    player_one_name: PlayerName
    player_two_name: PlayerName
    player_one_score: int
    player_two_score: int
    player_one_games_won: int
    player_two_games_won: int
    target_score: int
    game_mode: GameMode
    start_time: datetime
    frame_history: list[Frame] = field(default_factory=list)
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    completed_sets: list[MatchSet] = field(default_factory=list)
    break_player: Optional[PlayerName] = None
    player_one_color: Optional[BallColor] = None
    player_two_color: Optional[BallColor] = None


@dataclass(frozen=True)
class Game:
    """Completed match. Created once when the match ends, never mutated afterwards."""

    id: str
    player_one_name: PlayerName
    player_two_name: PlayerName
    player_one_score: int
    player_two_score: int
    target_score: int
    game_mode: GameMode
    winner: Optional[PlayerName]
    date: datetime
    start_time: datetime
    end_time: datetime
    frame_history: tuple[Frame, ...] = ()
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    sets: tuple[MatchSet, ...] = ()
    break_player: Optional[PlayerName] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None
