"""Tests for environment-based settings."""

from pathlib import Path

import pytest

from myflix.config import DEFAULT_API_URL, load_settings

ENV_VARS = (
    "MYFLIX_API_URL",
    "MYFLIX_HTTP_TIMEOUT",
    "MYFLIX_STORAGE",
    "MYFLIX_STORAGE_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from an empty configuration."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    """No variables set gives the documented defaults."""
    settings = load_settings(env_file=False)

    assert settings.api_url == DEFAULT_API_URL
    assert settings.http_timeout == 30.0
    assert settings.storage == "file"
    assert settings.storage_path == Path("~/.myflix/storage.json").expanduser()
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Every variable is honoured and normalized."""
    monkeypatch.setenv("MYFLIX_API_URL", "https://movies.example.com/")
    monkeypatch.setenv("MYFLIX_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("MYFLIX_STORAGE", "InMemory")
    monkeypatch.setenv("MYFLIX_STORAGE_PATH", str(tmp_path / "s.json"))
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(env_file=False)

    assert settings.api_url == "https://movies.example.com"
    assert settings.http_timeout == 2.5
    assert settings.storage == "inmemory"
    assert settings.storage_path == tmp_path / "s.json"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "name,value,message",
    [
        ("MYFLIX_API_URL", "ftp://movies", "MYFLIX_API_URL"),
        ("MYFLIX_HTTP_TIMEOUT", "soon", "must be a number"),
        ("MYFLIX_HTTP_TIMEOUT", "0", "must be positive"),
        ("LOG_LEVEL", "LOUD", "LOG_LEVEL"),
    ],
)
def test_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    """Bad values fail at start-up, not at first use."""
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        load_settings(env_file=False)


def test_dotenv_file_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """A .env in the working directory is read."""
    (tmp_path / ".env").write_text("MYFLIX_API_URL=https://from-dotenv.example.com\n")
    monkeypatch.chdir(tmp_path)
    # load_dotenv writes os.environ directly; register the key so it is restored
    monkeypatch.setenv("MYFLIX_API_URL", "")
    monkeypatch.delenv("MYFLIX_API_URL")

    settings = load_settings()

    assert settings.api_url == "https://from-dotenv.example.com"
