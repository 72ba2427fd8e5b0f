import pytest
from pydantic import ValidationError as PydanticValidationError

from lightbnb.core.config import DatabaseSettings, LoggingSettings, Settings, get_settings


def test_database_settings_from_environment(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "pg.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_NAME", "bnb")
    monkeypatch.setenv("DB_USER", "labber")

    db = DatabaseSettings()

    assert db.host == "pg.internal"
    assert db.port == 6543
    assert db.connect_kwargs()["dbname"] == "bnb"
    assert db.connect_kwargs()["user"] == "labber"
    assert "dsn" not in db.connect_kwargs()


def test_database_url_overrides_parts(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/other")

    kwargs = DatabaseSettings().connect_kwargs()

    assert kwargs["dsn"] == "postgresql://localhost/other"
    assert "host" not in kwargs


def test_blank_database_url_is_ignored(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "  ")

    assert DatabaseSettings().database_url is None


def test_logging_settings(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FILE", "logs/lightbnb.log")

    logging_settings = LoggingSettings()

    assert logging_settings.log_level == "DEBUG"
    assert logging_settings.log_file == "logs/lightbnb.log"


def test_settings_groups_sections():
    s = Settings()

    assert isinstance(s.database, DatabaseSettings)
    assert isinstance(s.logging, LoggingSettings)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_log_level_is_case_insensitive():
    assert LoggingSettings(log_level="debug").log_level == "DEBUG"


def test_unknown_log_level_is_rejected():
    with pytest.raises(PydanticValidationError):
        LoggingSettings(log_level="chatty")
