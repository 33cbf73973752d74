from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_SEARCH_MIN_LENGTH = 3


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/wiki.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - SEED_SAMPLE_DATA: 'true' to create the sample post at startup (default: false)
    - SEARCH_MIN_LENGTH: shortest list query that triggers a search (default: 3)
    - LOG_LEVEL: root log level (default: INFO)
    - HOST / PORT: bind address when run as a script (default: 0.0.0.0:8000)
    """

    persistence_backend: str = "memory"
    sqlite_db_path: str = "./data/wiki.db"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    seed_sample_data: bool = False
    search_min_length: int = DEFAULT_SEARCH_MIN_LENGTH
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int, minimum: int = 0) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/wiki.db").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        seed_sample_data=_parse_bool(_get_env("SEED_SAMPLE_DATA", "false"), False),
        search_min_length=_parse_int(_get_env("SEARCH_MIN_LENGTH", str(DEFAULT_SEARCH_MIN_LENGTH)), DEFAULT_SEARCH_MIN_LENGTH),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "8000"), 8000, minimum=1),
    )
