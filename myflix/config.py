"""Client configuration from environment variables.

An optional ``.env`` file in the working directory is loaded first.

Environment Variables:
    MYFLIX_API_URL: Backend root URL (default: http://localhost:8080)
    MYFLIX_HTTP_TIMEOUT: Request timeout in seconds (default: 30)
    MYFLIX_STORAGE: "file" | "inmemory" (default: file)
    MYFLIX_STORAGE_PATH: Session file (default: ~/.myflix/storage.json)
    LOG_LEVEL: Logging level name (default: INFO)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STORAGE_PATH = Path("~/.myflix/storage.json")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Resolved client settings."""

    api_url: str = DEFAULT_API_URL
    http_timeout: float = DEFAULT_TIMEOUT
    storage: str = "file"
    storage_path: Path = DEFAULT_STORAGE_PATH
    log_level: str = "INFO"


def load_settings(env_file: bool = True) -> Settings:
    """Build settings from the environment.

    Args:
        env_file: Load ``.env`` before reading variables

    Returns:
        Settings instance

    Raises:
        ValueError: If a variable holds an invalid value
    """
    if env_file:
        load_dotenv(Path.cwd() / ".env")

    api_url = os.getenv("MYFLIX_API_URL", DEFAULT_API_URL).strip()
    if not api_url.startswith(("http://", "https://")):
        raise ValueError(f"MYFLIX_API_URL must be an http(s) URL: {api_url!r}")

    raw_timeout = os.getenv("MYFLIX_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        http_timeout = float(raw_timeout)
    except ValueError:
        raise ValueError(f"MYFLIX_HTTP_TIMEOUT must be a number: {raw_timeout!r}")
    if http_timeout <= 0:
        raise ValueError(f"MYFLIX_HTTP_TIMEOUT must be positive: {raw_timeout!r}")

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}: {log_level!r}")

    return Settings(
        api_url=api_url.rstrip("/"),
        http_timeout=http_timeout,
        storage=os.getenv("MYFLIX_STORAGE", "file").lower(),
        storage_path=Path(os.getenv("MYFLIX_STORAGE_PATH", str(DEFAULT_STORAGE_PATH))).expanduser(),
        log_level=log_level,
    )
