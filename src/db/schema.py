"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


# --- LOCAL DEVICE STORAGE ---
class DBLocalItem(Base):
    """Key / value storage on the device (stands in for the browser's localStorage)."""

    __tablename__ = "local_storage"
    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


# --- REMOTE SERVICE ---
class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    player_one_name: Mapped[str]
    player_two_name: Mapped[str]
    player_one_score: Mapped[int]
    player_two_score: Mapped[int]
    target_score: Mapped[int]
    game_mode: Mapped[str]
    winner: Mapped[Optional[str]]
    date: Mapped[int] = mapped_column(BigInteger, index=True)
    start_time: Mapped[int] = mapped_column(BigInteger)
    end_time: Mapped[int] = mapped_column(BigInteger)
    frame_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    player_one_sets_won: Mapped[int] = mapped_column(default=0)
    player_two_sets_won: Mapped[int] = mapped_column(default=0)
    sets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    break_player: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)


class DBActiveGame(Base):
    """One row per user at most: the user id is the primary key."""

    __tablename__ = "active_games"
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64))
    player_one_name: Mapped[str]
    player_two_name: Mapped[str]
    player_one_score: Mapped[int]
    player_two_score: Mapped[int]
    player_one_games_won: Mapped[int] = mapped_column(default=0)
    player_two_games_won: Mapped[int] = mapped_column(default=0)
    target_score: Mapped[int]
    game_mode: Mapped[str]
    start_time: Mapped[int] = mapped_column(BigInteger)
    frame_history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    player_one_sets_won: Mapped[int] = mapped_column(default=0)
    player_two_sets_won: Mapped[int] = mapped_column(default=0)
    completed_sets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    break_player: Mapped[Optional[str]]
    player_one_color: Mapped[Optional[str]]
    player_two_color: Mapped[Optional[str]]
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
