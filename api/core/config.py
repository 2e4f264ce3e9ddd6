"""
Process configuration.

Settings are read once at startup (see `api/main.py`) and passed explicitly
to whatever needs them. Nothing reads the environment at request time.

Sources, highest priority first:
- process environment
- a local `.env` file (optional)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values


REQUIRED_DB_VARS = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")

DEFAULT_SSLMODE = "disable"
DEFAULT_CONNECT_TIMEOUT_S = 10.0
DEFAULT_COMMAND_TIMEOUT_S = 30.0


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class DatabaseSettings:
    host: str
    port: int
    user: str
    password: str = field(repr=False)
    name: str
    sslmode: str = DEFAULT_SSLMODE
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S
    command_timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S


@dataclass(frozen=True)
class Settings:
    database: DatabaseSettings
    verify_on_startup: bool = True
    log_level: str = "INFO"


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8080


def _read_env(env_file: str | Path | None) -> dict[str, str]:
    values: dict[str, str] = {}
    if env_file is not None and Path(env_file).is_file():
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(os.environ)
    return values


def _get(env: Mapping[str, str], name: str, default: str = "") -> str:
    return (env.get(name) or "").strip() or default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(env, name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}.") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}.")
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _get(env, name).lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}.")


def _parse_port(name: str, raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}.") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"{name} is out of range: {port}.")
    return port


def load_database_settings(env: Mapping[str, str]) -> DatabaseSettings:
    missing = [name for name in REQUIRED_DB_VARS if not _get(env, name)]
    if missing:
        raise ConfigError(f"Missing database configuration: {', '.join(missing)}.")

    return DatabaseSettings(
        host=_get(env, "DB_HOST"),
        port=_parse_port("DB_PORT", _get(env, "DB_PORT")),
        user=_get(env, "DB_USER"),
        # Passwords may legitimately carry surrounding spaces.
        password=env["DB_PASSWORD"],
        name=_get(env, "DB_NAME"),
        sslmode=_get(env, "DB_SSLMODE", DEFAULT_SSLMODE),
        connect_timeout_s=_env_float(env, "DB_CONNECT_TIMEOUT_S", DEFAULT_CONNECT_TIMEOUT_S),
        command_timeout_s=_env_float(env, "DB_COMMAND_TIMEOUT_S", DEFAULT_COMMAND_TIMEOUT_S),
    )


def load_settings(*, env_file: str | Path | None = ".env") -> Settings:
    """
    Build the process settings. Raises ConfigError when the database
    connection descriptor is incomplete; callers treat that as fatal.
    """
    env = _read_env(env_file)
    return Settings(
        database=load_database_settings(env),
        verify_on_startup=_env_bool(env, "DB_VERIFY_ON_STARTUP", True),
        log_level=_get(env, "LOG_LEVEL", "INFO").upper(),
    )


def load_server_settings(*, env_file: str | Path | None = ".env") -> ServerSettings:
    env = _read_env(env_file)
    raw_port = _get(env, "APP_PORT")
    return ServerSettings(
        host=_get(env, "APP_HOST", ServerSettings.host),
        port=_parse_port("APP_PORT", raw_port) if raw_port else ServerSettings.port,
    )
