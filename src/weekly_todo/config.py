# src/weekly_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Everything has a safe default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

ENV_PREFIX = "WEEKLY_TODO"

BACKENDS = ("sqlite", "json")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


def _env_timezone(name: str) -> ZoneInfo | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    backend: str
    storage_key: str
    seed_starter_tasks: bool

    # ---- Week computation ----
    timezone: ZoneInfo | None

    # ---- Links ----
    open_links: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    json_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "weekly-todo") or "weekly-todo"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        backend = _env_choice(_k("BACKEND"), BACKENDS, "sqlite")
        storage_key = _env(_k("STORAGE_KEY"), "weekly-todo-app").strip() or "weekly-todo-app"
        seed_starter_tasks = _env_bool(_k("SEED_STARTER_TASKS"), True)

        timezone = _env_timezone(_k("TIMEZONE"))
        open_links = _env_bool(_k("OPEN_LINKS"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/weekly-todo"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "weekly_todo.sqlite3")
        json_path = _env_path(_k("JSON_PATH"), data_dir / "weekly_todo.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend=backend,
            storage_key=storage_key,
            seed_starter_tasks=seed_starter_tasks,
            timezone=timezone,
            open_links=open_links,
            data_dir=data_dir,
            db_path=db_path,
            json_path=json_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
