"""Generate database sessions"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.schema import Base


def make_engine(url: str, echo: bool = False) -> Engine:
    """In-memory SQLite needs a single shared connection, otherwise every session sees an empty database."""
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo)


def make_session_factory(url: str, echo: bool = False) -> sessionmaker[Session]:
    engine = make_engine(url, echo=echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False)

