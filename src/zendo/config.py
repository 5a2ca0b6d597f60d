# src/zendo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time: missing Supabase credentials select
  the local fallback storage instead of failing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "ZENDO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Supabase (remote store) ----
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    tasks_table: str
    lists_table: str

    # ---- Local fallback paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    lists_path: Path

    # ---- Planner ----
    week_days: int

    @property
    def remote_configured(self) -> bool:
        return bool((self.supabase_url or "").strip()) and bool((self.supabase_key or "").strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "zendo") or "zendo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Accept the web client's variable names too, so one .env serves both.
        supabase_url = _first_env(
            _k("SUPABASE_URL"), "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", default=None
        )
        supabase_key = _first_env(
            _k("SUPABASE_KEY"),
            "SUPABASE_ANON_KEY",
            "NEXT_PUBLIC_SUPABASE_ANON_KEY",
            default=None,
        )
        tasks_table = _env(_k("TASKS_TABLE"), "tasks").strip() or "tasks"
        lists_table = _env(_k("LISTS_TABLE"), "lists").strip() or "lists"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/zendo"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        lists_path = _env_path(_k("LISTS_PATH"), data_dir / "lists.json")

        week_days = max(1, min(7, _env_int(_k("WEEK_DAYS"), 5)))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            supabase_url=supabase_url.strip() if supabase_url else None,
            supabase_key=supabase_key.strip() if supabase_key else None,
            tasks_table=tasks_table,
            lists_table=lists_table,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            lists_path=lists_path,
            week_days=week_days,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings (useful for testing)."""
    global _SETTINGS
    _SETTINGS = None
