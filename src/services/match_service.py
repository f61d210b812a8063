"""Orchestration between the UI layer, the scoring engine and the persistence gateway."""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import GameStateError
from src.core.models import ActiveGame, Game
from src.core.names import format_name_for_display, normalize_name, same_player
from src.core.shared_types import BallColor, GameMode, Side
from src.db.gateway import PersistenceGateway
from src.scoring.engine import ScoreEngine
from src.scoring.match_record import finalize
from src.scoring.rules import WinConditions
from src.services.autosave import AutoSaver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scoreboard:
    """What the scoreboard screen shows. The only place names get their display form."""

    title: str
    player_one: str
    player_two: str
    player_one_score: int
    player_two_score: int
    player_one_games_won: int
    player_two_games_won: int
    player_one_sets_won: int
    player_two_sets_won: int
    breaking: Side
    conditions: WinConditions


@dataclass(frozen=True)
class HeadToHead:
    """Results of past games between two players, seen from the first player's seat."""

    player_one_wins: int = 0
    player_two_wins: int = 0
    draws: int = 0

    @property
    def total(self) -> int:
        return self.player_one_wins + self.player_two_wins + self.draws


class MatchService:
    """Orchestration of layers for one user scoring their matches."""

    def __init__(self, gateway: PersistenceGateway, autosaver: Optional[AutoSaver] = None) -> None:
        self.gateway = gateway
        self.autosaver = autosaver or AutoSaver(gateway)
        self.engine: Optional[ScoreEngine] = None
        # In-memory caches of what is stored.
        self.active_game: Optional[ActiveGame] = None
        self.past_games: list[Game] = []

    # -- Match lifecycle ---
    def start_match(
        self,
        player_one: str,
        player_two: str,
        mode: GameMode,
        target: int,
        break_player: Optional[str] = None,
        player_one_color: Optional[BallColor] = None,
        player_two_color: Optional[BallColor] = None,
    ) -> Scoreboard:
        """Set up a new match. Nothing is saved until the first point is scored."""
        self.engine = ScoreEngine.new_match(
            player_one,
            player_two,
            mode,
            target,
            break_player=break_player,
            player_one_color=player_one_color,
            player_two_color=player_two_color,
        )
        return self.scoreboard()

    async def resume_match(self) -> Optional[Scoreboard]:
        """Pick up the stored in-progress match, if any."""
        snapshot = self.active_game or await self.gateway.get_active_game()
        if snapshot is None:
            return None
        self.active_game = snapshot
        self.engine = ScoreEngine.from_active_game(snapshot)
        return self.scoreboard()

    async def leave_match(self) -> Optional[ActiveGame]:
        """Back to the home screen: keep the match stored so it can be resumed."""
        engine = self._require_engine()
        self.engine = None
        if not engine.has_activity:
            return self.active_game
        self.active_game = engine.to_active_game()
        self.autosaver.submit(self.active_game)
        await self.autosaver.flush()
        return self.active_game

    async def end_match(self) -> Optional[Game]:
        """
        End the match (End Match button).
        ----

        1. build the Game record (None for a match in which nothing was scored)
        2. store it with the completed games
        3. clear the stored in-progress match

        If storing the record fails the error propagates and the match stays open.
        """
        engine = self._require_engine()
        game = finalize(engine)

        if game is not None:
            await self.gateway.add_game(game)
            self.past_games.insert(0, game)
            logger.info(
                "Match %s ended: %s (%d-%d)",
                game.id,
                game.winner or "draw",
                game.player_one_score,
                game.player_two_score,
            )

        self.engine = None
        self.active_game = None
        self.autosaver.submit(None)
        await self.autosaver.flush()
        return game

    async def cancel_active_game(self) -> None:
        """Drop the in-progress match without recording it."""
        self.engine = None
        self.active_game = None
        self.autosaver.submit(None)
        await self.autosaver.flush()

    # -- Scoring actions (synchronous, saving happens in the background) ---
    def increment(self, side: Side) -> Scoreboard:
        return self._after(self._require_engine().increment(side))

    def decrement(self, side: Side) -> Scoreboard:
        return self._after(self._require_engine().decrement(side))

    def special_score(self, side: Side) -> Scoreboard:
        return self._after(self._require_engine().special_score(side))

    def start_next_set(self) -> Scoreboard:
        return self._after(self._require_engine().start_next_set())

    # -- History ---
    async def load_history(self) -> list[Game]:
        self.past_games = await self.gateway.get_past_games()
        return self.past_games

    async def delete_game(self, game_id: str) -> None:
        await self.gateway.delete_game(game_id)
        self.past_games = [g for g in self.past_games if g.id != game_id]

    def head_to_head(self, player_one: str, player_two: str) -> HeadToHead:
        """Tally the past games between the two players, whichever seat each had back then."""
        p1, p2 = normalize_name(player_one), normalize_name(player_two)
        p1_wins = p2_wins = draws = 0
        for game in self.past_games:
            seats = {normalize_name(game.player_one_name), normalize_name(game.player_two_name)}
            if seats != {p1, p2}:
                continue
            if game.winner is None:
                draws += 1
            elif same_player(game.winner, p1):
                p1_wins += 1
            elif same_player(game.winner, p2):
                p2_wins += 1
        return HeadToHead(player_one_wins=p1_wins, player_two_wins=p2_wins, draws=draws)

    # -- Authentication state ---
    async def set_authenticated(self, authenticated: bool) -> None:
        """
        Sign-in / sign-out.
        ---

        * sign-out: every in-memory match and history cache is dropped
        * sign-in: both caches are reloaded from the remote store
        """
        self.gateway.reconfigure(authenticated)
        if not authenticated:
            self.engine = None
            self.active_game = None
            self.past_games = []
            return
        self.active_game = await self.gateway.get_active_game()
        self.past_games = await self.gateway.get_past_games()

    # -- Presentation ---
    def scoreboard(self) -> Scoreboard:
        engine = self._require_engine()
        title = engine.mode.display_name
        if engine.mode != GameMode.FREE_PLAY:
            title = f"{title} {engine.target}"
        return Scoreboard(
            title=title,
            player_one=format_name_for_display(engine.player_one),
            player_two=format_name_for_display(engine.player_two),
            player_one_score=engine.player_one_score,
            player_two_score=engine.player_two_score,
            player_one_games_won=engine.player_one_games_won,
            player_two_games_won=engine.player_two_games_won,
            player_one_sets_won=engine.player_one_sets_won,
            player_two_sets_won=engine.player_two_sets_won,
            breaking=engine.side_of(engine.break_player),
            conditions=engine.evaluate(),
        )

    # -- Internal helpers --
    def _require_engine(self) -> ScoreEngine:
        if self.engine is None:
            raise GameStateError("No match in progress.")
        return self.engine

    def _after(self, changed: bool) -> Scoreboard:
        """Every effective mutation schedules a save of the full snapshot."""
        engine = self._require_engine()
        if changed and engine.has_activity:
            self.active_game = engine.to_active_game()
            self.autosaver.submit(self.active_game)
        return self.scoreboard()
