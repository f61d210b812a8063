"""Turn a finished (or abandoned) match into its immutable Game record."""

from dataclasses import replace
from datetime import datetime
from typing import Optional
from uuid import uuid4

from src.core.clock import utc_now
from src.core.models import Game, PlayerName
from src.scoring.engine import ScoreEngine
from src.scoring.rules import Tally


def finalize(engine: ScoreEngine, now: Optional[datetime] = None) -> Optional[Game]:
    """
    Build the Game record for the match in the engine.
    ----

    1. nothing scored at all? --> no record (the caller just discards the in-progress state)
    2. "Sets of" match ended mid-set --> that set counts towards the final set list and sets won
    3. determine the winner (see _decide_winner)
    4. stamp the record with the end time

    The engine is only read: if storing the record fails, the match carries on from where it was.
    """
    if not engine.has_activity:
        return None

    sets = list(engine.completed_sets)
    tally = engine.tally
    running = engine.running_set()
    if running is not None:
        sets.append(running)
        if running.winner == engine.player_one:
            tally = replace(tally, player_one_sets_won=tally.player_one_sets_won + 1)
        elif running.winner == engine.player_two:
            tally = replace(tally, player_two_sets_won=tally.player_two_sets_won + 1)

    winner = engine.winner if engine.evaluate().game_ended else _decide_winner(engine, tally)
    end_time = now or utc_now()
    return Game(
        id=str(uuid4()),
        player_one_name=engine.player_one,
        player_two_name=engine.player_two,
        player_one_score=engine.player_one_score,
        player_two_score=engine.player_two_score,
        target_score=engine.target,
        game_mode=engine.mode,
        winner=winner,
        date=end_time,
        start_time=engine.start_time,
        end_time=end_time,
        frame_history=engine.ledger.frames,
        player_one_sets_won=tally.player_one_sets_won,
        player_two_sets_won=tally.player_two_sets_won,
        sets=tuple(sets),
        break_player=engine.break_player,
    )


def _decide_winner(engine: ScoreEngine, tally: Tally) -> Optional[PlayerName]:
    """
    Match ended early by the user: compare the counter that matters for the mode.
    ---

    * Best of --> sub-games won
    * Sets of --> sets won (including the set that was still running)
    * Race to / Free play --> running score

    Equal counters mean a draw (None).
    """
    p1, p2 = engine.rules.deciding_counts(tally)
    if p1 > p2:
        return engine.player_one
    if p2 > p1:
        return engine.player_two
    return None
