"""
Win / end-of-set conditions for every game mode.
----

One rule object per mode. The engine picks it once (when the match is configured) and asks it, after every mutation,
what the current scores mean. No other part of the code branches on the mode for win detection.
"""

from dataclasses import dataclass

from src.core.exceptions import GameStateError
from src.core.shared_types import GameMode


@dataclass(frozen=True)
class Tally:
    """Read-only view on the counters the rules need."""

    player_one_score: int = 0
    player_two_score: int = 0
    player_one_games_won: int = 0
    player_two_games_won: int = 0
    player_one_sets_won: int = 0
    player_two_sets_won: int = 0
    sub_game_ended: bool = False

    @property
    def frames_in_sub_game(self) -> int:
        return self.player_one_score + self.player_two_score


@dataclass(frozen=True)
class WinConditions:
    p1_won: bool = False
    p2_won: bool = False
    game_ended: bool = False
    set_ended: bool = False

    @property
    def accepts_scoring(self) -> bool:
        return not (self.game_ended or self.set_ended)


class ModeRules:
    """Base rules: scoring never ends (free play)."""

    mode: GameMode = GameMode.FREE_PLAY
    plays_sets: bool = False

    def __init__(self, target: int) -> None:
        self.target = target

    def evaluate(self, tally: Tally) -> WinConditions:
        return WinConditions()

    def closes_sub_game(self, tally: Tally) -> bool:
        """Does the frame just scored finish the current sub-game?"""
        return False

    def deciding_counts(self, tally: Tally) -> tuple[int, int]:
        """The counters compared when the match is ended before the rules decided it."""
        return tally.player_one_score, tally.player_two_score


class FreePlayRules(ModeRules):
    mode = GameMode.FREE_PLAY


class RaceToRules(ModeRules):
    """First to reach the target score wins."""

    mode = GameMode.RACE_TO

    def evaluate(self, tally: Tally) -> WinConditions:
        p1_won = tally.player_one_score >= self.target
        p2_won = tally.player_two_score >= self.target
        return WinConditions(p1_won=p1_won, p2_won=p2_won, game_ended=p1_won or p2_won)


class SetsOfRules(ModeRules):
    """
    A set is won by reaching the target score, the match by winning target sets.

    NOTE set completion only happens on an explicit "start next set", so sets won lag behind set_ended.
    """

    mode = GameMode.FIRST_TO
    plays_sets = True

    def evaluate(self, tally: Tally) -> WinConditions:
        p1_won = tally.player_one_sets_won >= self.target
        p2_won = tally.player_two_sets_won >= self.target
        set_ended = (
            tally.player_one_score >= self.target
            or tally.player_two_score >= self.target
        )
        return WinConditions(
            p1_won=p1_won,
            p2_won=p2_won,
            game_ended=p1_won or p2_won,
            set_ended=set_ended,
        )

    def deciding_counts(self, tally: Tally) -> tuple[int, int]:
        return tally.player_one_sets_won, tally.player_two_sets_won


class BestOfRules(ModeRules):
    """
    Discrete sub-games of target frames each; the match lasts target sub-games.
    ---

    A side has won once it holds a majority of the sub-games, or once all sub-games are played and it is ahead.
    """

    mode = GameMode.BEST_OF

    @property
    def majority(self) -> int:
        return self.target // 2 + 1

    def evaluate(self, tally: Tally) -> WinConditions:
        p1 = tally.player_one_games_won
        p2 = tally.player_two_games_won
        all_played = p1 + p2 >= self.target
        return WinConditions(
            p1_won=p1 >= self.majority or (all_played and p1 > p2),
            p2_won=p2 >= self.majority or (all_played and p2 > p1),
            game_ended=all_played,
            set_ended=tally.sub_game_ended,
        )

    def closes_sub_game(self, tally: Tally) -> bool:
        return tally.frames_in_sub_game >= self.target

    def deciding_counts(self, tally: Tally) -> tuple[int, int]:
        return tally.player_one_games_won, tally.player_two_games_won


RULES: dict[GameMode, type[ModeRules]] = {
    GameMode.RACE_TO: RaceToRules,
    GameMode.FIRST_TO: SetsOfRules,
    GameMode.BEST_OF: BestOfRules,
    GameMode.FREE_PLAY: FreePlayRules,
}


def rules_for(mode: GameMode, target: int) -> ModeRules:
    """Select the rules for a match. Killer has no live scoring engine."""
    if mode not in RULES:
        raise GameStateError(f"No live scoring rules for game mode {mode!r}.")
    if mode != GameMode.FREE_PLAY and target < 1:
        raise GameStateError(
            f"Target must be a positive number for {mode.display_name!r}, got {target}."
        )
    return RULES[mode](target)
