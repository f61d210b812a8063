import logging

import pytest

from src.core.config import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_LOCAL_DB_URL,
    Settings,
    configure_logging,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "BREAKANDRUN_LOCAL_DB_URL",
        "BREAKANDRUN_REMOTE_DB_URL",
        "BREAKANDRUN_API_URL",
        "BREAKANDRUN_API_TIMEOUT",
        "BREAKANDRUN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.local_db_url == DEFAULT_LOCAL_DB_URL
    assert settings.api_url == "http://localhost:8000"
    assert settings.api_timeout == DEFAULT_API_TIMEOUT
    assert settings.log_level == "INFO"


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BREAKANDRUN_API_URL", " https://scores.example.com/ ")
    monkeypatch.setenv("BREAKANDRUN_API_TIMEOUT", "2.5")
    monkeypatch.setenv("BREAKANDRUN_LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.api_url == "https://scores.example.com"
    assert settings.api_timeout == 2.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout_falls_back(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, raw: str
) -> None:
    monkeypatch.setenv("BREAKANDRUN_API_TIMEOUT", raw)
    with caplog.at_level(logging.WARNING, logger="src.core.config"):
        settings = Settings.from_env()
    assert settings.api_timeout == DEFAULT_API_TIMEOUT
    assert "BREAKANDRUN_API_TIMEOUT" in caplog.text


def test_configure_logging_installs_one_handler() -> None:
    root = logging.getLogger()
    level = root.level
    try:
        configure_logging("WARNING")
        configure_logging("DEBUG")
        ours = [h for h in root.handlers if getattr(h, "_breakandrun", False)]
        assert len(ours) == 1
        assert root.level == logging.DEBUG
    finally:
        for handler in [h for h in root.handlers if getattr(h, "_breakandrun", False)]:
            root.removeHandler(handler)
        root.setLevel(level)
