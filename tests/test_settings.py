"""
Environment configuration tests
"""

import pytest

from config.settings import Settings

ENV_VARS = [
    "SUPABASE_URL", "DATABASE_URL", "SUPABASE_KEY", "HOST", "PORT", "ALLOWED_ORIGINS",
    "LOG_LEVEL", "STRICT_NOT_FOUND", "DB_POOL_MIN_SIZE", "DB_POOL_MAX_SIZE", "DB_COMMAND_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()

    assert settings.database_url is None
    assert settings.port == 8000
    assert settings.host == "0.0.0.0"
    assert settings.allowed_origins == ["http://localhost:8000", "http://localhost:5173"]
    assert settings.strict_not_found is False
    assert settings.db_command_timeout is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "postgresql://db.example.supabase.co/postgres")
    monkeypatch.setenv("SUPABASE_KEY", "service-key")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("ALLOWED_ORIGINS", " https://a.example , https://b.example ,")
    monkeypatch.setenv("STRICT_NOT_FOUND", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DB_COMMAND_TIMEOUT", "2.5")

    settings = Settings.from_env()

    assert settings.database_url == "postgresql://db.example.supabase.co/postgres"
    assert settings.database_key == "service-key"
    assert settings.port == 9000
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.strict_not_found is True
    assert settings.log_level == "DEBUG"
    assert settings.db_command_timeout == 2.5


def test_database_url_fallback(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://fallback")
    assert Settings.from_env().database_url == "postgresql://fallback"


def test_wildcard_origin(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    settings = Settings.from_env()
    assert settings.allowed_origins == ["*"]
    assert settings.allow_all_origins


def test_validate_requires_database_url():
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        Settings().validate()


def test_validate_pool_bounds():
    with pytest.raises(ValueError):
        Settings(database_url="postgresql://db", db_pool_min_size=5, db_pool_max_size=2).validate()
