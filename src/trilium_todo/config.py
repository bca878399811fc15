# src/trilium_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

- One Settings object for the whole app.
- No secrets required at import time; `Settings.validate()` checks them at startup.
- Every key accepts the TODO_-prefixed name first and the bare legacy name second
  (TRILIUM_API_URL, TRILIUM_API_TOKEN, ...).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import httpx
from dotenv import load_dotenv

ENV_PREFIX = "TODO"


class ConfigError(RuntimeError):
    """Required configuration is missing or invalid."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_str(suffix: str, default: str = "") -> str:
    return (_first_env(_k(suffix), suffix, default=default) or "").strip()


def _env_bool(suffix: str, default: bool) -> bool:
    raw = _first_env(_k(suffix), suffix)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(suffix: str, default: float) -> float:
    raw = _first_env(_k(suffix), suffix)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(suffix: str, default: list[str]) -> list[str]:
    raw = _first_env(_k(suffix), suffix)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(suffix: str, default: Path) -> Path:
    raw = _first_env(_k(suffix), suffix)
    if raw is None:
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Trilium note ----
    trilium_api_url: str
    trilium_api_token: str
    http_timeout_seconds: float

    # ---- Connectors ----
    console_enabled: bool
    console_user_id: str
    matrix_enabled: bool
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_rooms: list[str]
    matrix_store_path: Path

    # ---- Background jobs ----
    stats_interval_seconds: float

    @staticmethod
    def from_env() -> Settings:
        data_dir = _env_path("DATA_DIR", Path(".local/trilium-todo"))
        return Settings(
            app_name=_env_str("APP_NAME", "trilium-todo"),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            data_dir=data_dir,
            trilium_api_url=_env_str("TRILIUM_API_URL"),
            trilium_api_token=_env_str("TRILIUM_API_TOKEN"),
            http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", 15.0),
            console_enabled=_env_bool("CONSOLE_ENABLED", True),
            console_user_id=_env_str("CONSOLE_USER_ID", "console"),
            matrix_enabled=_env_bool("MATRIX_ENABLED", False),
            matrix_homeserver=_env_str("MATRIX_HOMESERVER"),
            matrix_user_id=_env_str("MATRIX_USER_ID"),
            matrix_password=_env_str("MATRIX_PASSWORD"),
            matrix_rooms=_env_list("MATRIX_ROOMS", []),
            matrix_store_path=_env_path("MATRIX_STORE_PATH", data_dir / "matrix_store"),
            stats_interval_seconds=_env_float("STATS_INTERVAL_SECONDS", 30 * 60.0),
        )

    def missing_required(self) -> list[str]:
        missing: list[str] = []
        if not self.trilium_api_url:
            missing.append(_k("TRILIUM_API_URL"))
        if not self.trilium_api_token:
            missing.append(_k("TRILIUM_API_TOKEN"))
        if self.matrix_enabled and not (self.matrix_homeserver and self.matrix_user_id):
            missing.extend([_k("MATRIX_HOMESERVER"), _k("MATRIX_USER_ID")])
        return missing

    def validate(self) -> None:
        missing = self.missing_required()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        try:
            url = httpx.URL(self.trilium_api_url)
        except httpx.InvalidURL as e:
            raise ConfigError(f"Invalid {_k('TRILIUM_API_URL')}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigError(f"Invalid {_k('TRILIUM_API_URL')}: expected an http(s) URL")
        if not (self.console_enabled or self.matrix_enabled):
            raise ConfigError("No connector enabled: set TODO_CONSOLE_ENABLED or TODO_MATRIX_ENABLED")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Load .env once and build the process-wide Settings."""
    global _settings
    if _settings is None:
        load_dotenv(override=False)
        _settings = Settings.from_env()
    return _settings
