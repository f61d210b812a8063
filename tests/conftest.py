"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from fastapi import FastAPI
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.api.app import create_app
from src.api.auth import StaticTokenVerifier
from src.core.config import Settings
from src.core.models import ActiveGame, Game
from src.db.schema import Base
from tests.factories import make_active_game, make_game

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Bearer tokens known to the test service, and the users they belong to.
TOKENS = {"token-alice": "user-alice", "token-bob": "user-bob"}


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Factory bound to a fresh test database. Tables are removed at teardown so tests stay independent."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session_repo(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Connection to a test database."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sample_game() -> Game:
    return make_game()


@pytest.fixture
def sample_active_game() -> ActiveGame:
    return make_active_game()


@pytest.fixture
def app(session_factory: sessionmaker[Session]) -> FastAPI:
    """Remote service on top of the test database."""
    return create_app(
        StaticTokenVerifier(TOKENS),
        session_factory=session_factory,
        settings=Settings(log_level="WARNING"),
    )
