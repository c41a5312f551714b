from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_PORT = 3000
DEFAULT_MONGODB_URI = "mongodb://mongo:27017/taskmanager"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - BACKEND_PORT (or PORT): listen port. Default 3000
    - BACKEND_HOST: listen address. Default '0.0.0.0'
    - MONGODB_URI (or DATABASE_URL): storage connection string.
      Default 'mongodb://mongo:27017/taskmanager'
    - MONGODB_TIMEOUT_MS: server selection timeout used when connecting. Default 5000
    - PERSISTENCE_BACKEND: 'mongo' (default) or 'memory'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: console log level name. Default 'INFO'
    """

    port: int
    host: str
    mongodb_uri: str
    mongodb_timeout_ms: int
    persistence_backend: str
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _first_env(names: List[str], default: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _parse_int(value: str, default: int, minimum: int = 0, maximum: Optional[int] = None) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    if parsed < minimum or (maximum is not None and parsed > maximum):
        return default
    return parsed


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


def _parse_log_level(value: str) -> str:
    name = value.strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return "INFO"


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "mongo").strip().lower()
    if backend not in {"mongo", "memory"}:
        backend = "mongo"

    port = _parse_int(_first_env(["BACKEND_PORT", "PORT"], str(DEFAULT_PORT)), DEFAULT_PORT, 1, 65535)
    timeout_ms = _parse_int(_get_env("MONGODB_TIMEOUT_MS", "5000"), 5000, 1)

    return Settings(
        port=port,
        host=_get_env("BACKEND_HOST", "0.0.0.0").strip(),
        mongodb_uri=_first_env(["MONGODB_URI", "DATABASE_URL"], DEFAULT_MONGODB_URI).strip(),
        mongodb_timeout_ms=timeout_ms,
        persistence_backend=backend,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_parse_log_level(_get_env("LOG_LEVEL", "INFO")),
    )
