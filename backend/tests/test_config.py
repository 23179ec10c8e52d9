from datetime import timedelta

import pytest
from pydantic import ValidationError

from inventory_api.core.config import Settings, parse_duration
from inventory_api.core.logging_config import ACCESS_LOGGER, build_logging_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("JWT_SECRET", "DATABASE_URL", "JWT_EXPIRATION", "CORS_ORIGINS", "LOG_DIR"):
        monkeypatch.delenv(name, raising=False)


def _settings(**overrides) -> Settings:
    values = {"jwt_secret": "s3cret", "database_url": "sqlite://", "log_dir": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1h", timedelta(hours=1)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("7d", timedelta(days=7)),
        ("500ms", timedelta(milliseconds=500)),
        ("3600", timedelta(seconds=3600)),
        (120, timedelta(seconds=120)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("an hour")


def test_secret_and_database_are_required():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, jwt_secret="s3cret")


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("JWT_EXPIRATION", "15m")

    settings = Settings(_env_file=None)

    assert settings.jwt_secret == "from-env"
    assert settings.token_lifetime == timedelta(minutes=15)


def test_invalid_expiration_fails_fast():
    with pytest.raises(ValidationError):
        _settings(jwt_expiration="soon")


def test_heroku_style_url_is_rewritten():
    settings = _settings(database_url="postgres://u:p@host:5432/db")

    assert settings.database_url == "postgresql+psycopg://u:p@host:5432/db"


def test_settings_are_immutable():
    settings = _settings()

    with pytest.raises(ValidationError):
        settings.jwt_secret = "changed"


def test_cors_origins():
    assert _settings().cors_origins == ["*"]
    parsed = _settings(CORS_ORIGINS="http://a.example/, http://b.example")
    assert parsed.cors_origins == ["http://a.example", "http://b.example"]


def test_admin_credentials():
    settings = _settings(admin1_password="one-one-one", admin2_username="ops")

    first, second = settings.admin_credentials
    assert (first.username, first.password, first.is_admin) == ("admin1", "one-one-one", True)
    assert (second.username, second.password) == ("ops", "")


def test_logging_config_without_files():
    config = build_logging_config(_settings())

    assert set(config["handlers"]) == {"console"}
    assert config["loggers"][ACCESS_LOGGER]["propagate"] is False


def test_logging_config_with_files(tmp_path):
    config = build_logging_config(_settings(log_dir=str(tmp_path / "logs")))

    assert {"app_file", "error_file", "access_file"} <= set(config["handlers"])
    assert config["handlers"]["error_file"]["level"] == "ERROR"
    assert config["loggers"][ACCESS_LOGGER]["handlers"] == ["access_file"]
    assert (tmp_path / "logs").is_dir()
