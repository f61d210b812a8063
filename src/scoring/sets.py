"""Set bookkeeping for "Sets of" matches."""

from typing import Iterable, Optional

from src.core.models import Frame, MatchSet, PlayerName


def set_winner(
    player_one_score: int,
    player_two_score: int,
    player_one: PlayerName,
    player_two: PlayerName,
) -> Optional[PlayerName]:
    """
    Whoever is ahead takes the set. This covers both a set played to the target and one cut short by ending the match.
    A true tie has no winner.
    """
    if player_one_score > player_two_score:
        return player_one
    if player_two_score > player_one_score:
        return player_two
    return None


def build_set(
    completed_sets: list[MatchSet],
    player_one_score: int,
    player_two_score: int,
    winner: Optional[PlayerName],
    frames: Iterable[Frame],
) -> MatchSet:
    """Numbers are contiguous: the new set always follows the completed ones."""
    return MatchSet(
        set_number=len(completed_sets) + 1,
        player_one_score=player_one_score,
        player_two_score=player_two_score,
        winner=winner,
        frames=tuple(frames),
    )

