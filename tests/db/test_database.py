import asyncio

from sqlalchemy import inspect

from src.core.config import Settings
from src.db.database import make_engine, make_session_factory
from src.db.local_store import KeyValueStorage, LocalStore
from src.db.remote_store import RemoteStore
from tests.factories import make_active_game


def test_session_factory_creates_tables() -> None:
    session_factory = make_session_factory("sqlite:///:memory:")
    engine = session_factory.kw["bind"]
    assert {"local_storage", "games", "active_games"} <= set(inspect(engine).get_table_names())

    # One shared connection: data written by one session is seen by the next.
    storage = KeyValueStorage(session_factory)
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"


def test_file_database_engine(tmp_path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'local.db'}")
    assert engine.dialect.name == "sqlite"
    engine.dispose()


def test_remote_store_from_settings() -> None:
    settings = Settings(api_url="https://scores.example.com", api_timeout=3.0)
    store = RemoteStore.from_settings(settings, lambda: None)
    assert store.client.base_url.host == "scores.example.com"
    assert store.client.timeout.read == 3.0
    asyncio.run(store.aclose())


def test_local_store_from_settings(tmp_path) -> None:
    settings = Settings(local_db_url=f"sqlite:///{tmp_path / 'device.db'}")
    store = LocalStore.from_settings(settings)
    snapshot = make_active_game()
    asyncio.run(store.save_active_game(snapshot))

    # A second store on the same file sees what the first one wrote.
    reopened = LocalStore.from_settings(settings)
    assert asyncio.run(reopened.get_active_game()) == snapshot
    assert (tmp_path / "device.db").exists()
