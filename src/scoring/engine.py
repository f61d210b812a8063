"""
The ScoreEngine is the entrypoint into the scoring domain for the service layer.
It holds the running state of one two-player match, applies the scoring actions coming from the UI, and derives
(via the rules of the configured mode) whether a set, sub-game or the match itself has ended.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Self
from uuid import uuid4

from src.core.clock import utc_now
from src.core.exceptions import GameStateError
from src.core.models import ActiveGame, Frame, MatchSet, PlayerName
from src.core.names import normalize_name
from src.core.shared_types import BallColor, DishType, GameMode, Side
from src.scoring.ledger import FrameLedger
from src.scoring.rules import ModeRules, Tally, WinConditions, rules_for
from src.scoring.sets import build_set, set_winner

logger = logging.getLogger(__name__)


@dataclass
class ScoreEngine:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    id: str
    player_one: PlayerName
    player_two: PlayerName
    rules: ModeRules
    start_time: datetime
    break_player: PlayerName
    ledger: FrameLedger = field(default_factory=FrameLedger)
    set_ledger: FrameLedger = field(default_factory=FrameLedger)
    completed_sets: list[MatchSet] = field(default_factory=list)
    player_one_score: int = 0
    player_two_score: int = 0
    player_one_games_won: int = 0
    player_two_games_won: int = 0
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    sub_game_ended: bool = False
    player_one_color: Optional[BallColor] = None
    player_two_color: Optional[BallColor] = None

    @classmethod
    def new_match(
        cls,
        player_one: str,
        player_two: str,
        mode: GameMode,
        target: int,
        break_player: Optional[str] = None,
        player_one_color: Optional[BallColor] = None,
        player_two_color: Optional[BallColor] = None,
    ) -> Self:
        """Start a fresh match. Player one breaks unless told otherwise."""
        p1, p2 = cls._validate_players(player_one, player_two)
        breaker = normalize_name(break_player) if break_player else p1
        if breaker not in (p1, p2):
            raise GameStateError(
                f"Break player {break_player!r} is not playing in this match."
            )
        return cls(
            id=str(uuid4()),
            player_one=p1,
            player_two=p2,
            rules=rules_for(mode, target),
            start_time=utc_now(),
            break_player=breaker,
            player_one_color=player_one_color,
            player_two_color=player_two_color,
        )

    @classmethod
    def from_active_game(cls, snapshot: ActiveGame) -> Self:
        """Resume a match from its persisted snapshot."""
        p1, p2 = cls._validate_players(snapshot.player_one_name, snapshot.player_two_name)
        rules = rules_for(snapshot.game_mode, snapshot.target_score)

        # Frames of the running set are the ones not yet folded into a completed set.
        set_frames: list[Frame] = []
        if rules.plays_sets:
            folded = sum(len(match_set.frames) for match_set in snapshot.completed_sets)
            set_frames = snapshot.frame_history[folded:]

        return cls(
            id=snapshot.id,
            player_one=p1,
            player_two=p2,
            rules=rules,
            start_time=snapshot.start_time,
            break_player=snapshot.break_player or p1,
            ledger=FrameLedger(snapshot.frame_history),
            set_ledger=FrameLedger(set_frames),
            completed_sets=list(snapshot.completed_sets),
            player_one_score=snapshot.player_one_score,
            player_two_score=snapshot.player_two_score,
            player_one_games_won=snapshot.player_one_games_won,
            player_two_games_won=snapshot.player_two_games_won,
            player_one_sets_won=snapshot.player_one_sets_won,
            player_two_sets_won=snapshot.player_two_sets_won,
            player_one_color=snapshot.player_one_color,
            player_two_color=snapshot.player_two_color,
        )

    def to_active_game(self) -> ActiveGame:
        """Snapshot for the persistence layer."""
        return ActiveGame(
            id=self.id,
            player_one_name=self.player_one,
            player_two_name=self.player_two,
            player_one_score=self.player_one_score,
            player_two_score=self.player_two_score,
            player_one_games_won=self.player_one_games_won,
            player_two_games_won=self.player_two_games_won,
            target_score=self.target,
            game_mode=self.mode,
            start_time=self.start_time,
            frame_history=list(self.ledger.frames),
            player_one_sets_won=self.player_one_sets_won,
            player_two_sets_won=self.player_two_sets_won,
            completed_sets=list(self.completed_sets),
            break_player=self.break_player,
            player_one_color=self.player_one_color,
            player_two_color=self.player_two_color,
        )

    @property
    def mode(self) -> GameMode:
        return self.rules.mode

    @property
    def target(self) -> int:
        return self.rules.target

    @property
    def tally(self) -> Tally:
        return Tally(
            player_one_score=self.player_one_score,
            player_two_score=self.player_two_score,
            player_one_games_won=self.player_one_games_won,
            player_two_games_won=self.player_two_games_won,
            player_one_sets_won=self.player_one_sets_won,
            player_two_sets_won=self.player_two_sets_won,
            sub_game_ended=self.sub_game_ended,
        )

    def evaluate(self) -> WinConditions:
        """Pure derivation of the win / end-of-set conditions from the current counters."""
        return self.rules.evaluate(self.tally)

    @property
    def winner(self) -> Optional[PlayerName]:
        """Winner as decided by the mode rules. None while the match is still running (or ended level)."""
        conditions = self.evaluate()
        if not conditions.game_ended:
            return None
        if conditions.p1_won:
            return self.player_one
        if conditions.p2_won:
            return self.player_two
        return None

    @property
    def has_activity(self) -> bool:
        """Anything worth saving? A fresh 0-0 match with no frames is not."""
        return bool(self.ledger) or any(
            (
                self.player_one_score,
                self.player_two_score,
                self.player_one_games_won,
                self.player_two_games_won,
                self.player_one_sets_won,
                self.player_two_sets_won,
            )
        )

    def name_of(self, side: Side) -> PlayerName:
        return self.player_one if side == Side.ONE else self.player_two

    def side_of(self, player: str) -> Side:
        name = normalize_name(player)
        if name == self.player_one:
            return Side.ONE
        if name == self.player_two:
            return Side.TWO
        raise GameStateError(f"{player!r} is not playing in this match.")

    def score_of(self, side: Side) -> int:
        return self.player_one_score if side == Side.ONE else self.player_two_score

    def increment(self, side: Side, dish_type: Optional[DishType] = None) -> bool:
        """
        Score one for the given side.
        ----

        1. ignore the action once the match, the current set, or the current sub-game has ended
        2. bump the score and record the Frame
        3. hand the break over to the other player
        4. settle the sub-game if this frame closed it

        Returns whether the action had any effect.
        """
        if not self.evaluate().accepts_scoring or self.sub_game_ended:
            return False

        self._set_score(side, self.score_of(side) + 1)
        self._record_frame(side, 1, dish_type)
        self._flip_break()

        if self.rules.closes_sub_game(self.tally):
            self.sub_game_ended = True
        self._settle()
        return True

    def special_score(self, side: Side) -> bool:
        """A dish: counts like a normal point, tagged by who held the break."""
        dish_type = (
            DishType.BREAK_DISH
            if self.break_player == self.name_of(side)
            else DishType.REVERSE_DISH
        )
        return self.increment(side, dish_type)

    def decrement(self, side: Side) -> bool:
        """
        Undo a point for the given side.

        NOTE undo pops the most recent Frame, it does not write a compensating entry.
        NOTE games / sets won are never rewound: once a set or sub-game rolled over, its result stays.
        """
        current = self.score_of(side)
        if current == 0:
            return False

        self._set_score(side, current - 1)
        self.ledger.pop()
        if self.rules.plays_sets:
            self.set_ledger.pop()
        self._flip_break()
        return True

    def start_next_set(self) -> bool:
        """
        Close the finished set and start the next one ("Sets of" mode).
        ---

        Only has an effect once the running set reached its target and nobody has won the match yet.
        """
        if not self.rules.plays_sets:
            return False
        conditions = self.evaluate()
        if not conditions.set_ended or conditions.game_ended:
            return False

        self._close_set()
        self._flip_break()
        return True

    def running_set(self) -> Optional[MatchSet]:
        """
        The unfinished set as it would be recorded if the match ended now (the engine is left as it is).
        None outside "Sets of" mode or when no frame was scored in it.
        """
        if not self.rules.plays_sets or not self.set_ledger:
            return None
        return self._build_set()

    # -- PRIVATE HELPERS ---
    @staticmethod
    def _validate_players(player_one: str, player_two: str) -> tuple[PlayerName, PlayerName]:
        p1, p2 = normalize_name(player_one), normalize_name(player_two)
        if not p1 or not p2:
            raise GameStateError("Both players need a name.")
        if p1 == p2:
            raise GameStateError(f"Players must have different names, got {p1!r} twice.")
        return p1, p2

    def _set_score(self, side: Side, value: int) -> None:
        if side == Side.ONE:
            self.player_one_score = value
        else:
            self.player_two_score = value

    def _record_frame(
        self, side: Side, score_change: int, dish_type: Optional[DishType]
    ) -> None:
        frame = Frame(
            timestamp=utc_now(),
            player=self.name_of(side),
            score_change=score_change,
            player_one_score=self.player_one_score,
            player_two_score=self.player_two_score,
            dish_type=dish_type,
        )
        self.ledger.append(frame)
        if self.rules.plays_sets:
            self.set_ledger.append(frame)

    def _flip_break(self) -> None:
        self.break_player = (
            self.player_two if self.break_player == self.player_one else self.player_one
        )

    def _build_set(self) -> MatchSet:
        winner = set_winner(
            self.player_one_score,
            self.player_two_score,
            self.player_one,
            self.player_two,
        )
        return build_set(
            self.completed_sets,
            self.player_one_score,
            self.player_two_score,
            winner,
            self.set_ledger,
        )

    def _close_set(self) -> MatchSet:
        new_set = self._build_set()
        self.completed_sets.append(new_set)
        if new_set.winner == self.player_one:
            self.player_one_sets_won += 1
        elif new_set.winner == self.player_two:
            self.player_two_sets_won += 1

        self.player_one_score = 0
        self.player_two_score = 0
        self.set_ledger.clear()
        return new_set

    def _settle(self) -> None:
        """Resolve a finished best-of sub-game: award it, reset the scores, clear the flag."""
        if not self.sub_game_ended:
            return

        if self.player_one_score > self.player_two_score:
            self.player_one_games_won += 1
        elif self.player_two_score > self.player_one_score:
            self.player_two_games_won += 1
        else:
            # A level sub-game awards nothing and gets replayed.
            logger.info(
                "Sub-game tied %d-%d in match %s; replaying it",
                self.player_one_score,
                self.player_two_score,
                self.id,
            )

        self.player_one_score = 0
        self.player_two_score = 0
        self.sub_game_ended = False
