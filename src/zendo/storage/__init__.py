# src/zendo/storage/__init__.py

"""
Backend selection.

Supabase when both URL and key are configured, otherwise the local
SQLite/JSON fallback. A missing or broken remote configuration is never fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import Settings
from ..core.ports import ListRepo, TaskRepo
from .local_store import JsonListStore, SqliteTaskStore

logger = logging.getLogger(__name__)

BACKEND_SUPABASE = "supabase"
BACKEND_LOCAL = "local"

_fallback_warned = False


@dataclass(slots=True)
class Stores:
    backend: str
    tasks: TaskRepo
    lists: ListRepo


def _warn_fallback_once(reason: str) -> None:
    global _fallback_warned
    if _fallback_warned:
        return
    _fallback_warned = True
    logger.warning(
        "%s; using local storage. Set ZENDO_SUPABASE_URL and ZENDO_SUPABASE_KEY "
        "(or SUPABASE_URL / SUPABASE_ANON_KEY) to sync data.",
        reason,
    )


def build_local_stores(settings: Settings) -> Stores:
    return Stores(
        backend=BACKEND_LOCAL,
        tasks=SqliteTaskStore(settings.tasks_db_path),
        lists=JsonListStore(settings.lists_path),
    )


def build_stores(settings: Settings) -> Stores:
    if not settings.remote_configured:
        _warn_fallback_once("Supabase credentials are missing")
        return build_local_stores(settings)

    try:
        from .client import get_supabase_client
        from .supabase_store import SupabaseListStore, SupabaseTaskStore

        client = get_supabase_client(settings)
    except Exception:
        logger.exception("Supabase client could not be created")
        _warn_fallback_once("Supabase is unavailable")
        return build_local_stores(settings)

    logger.info("Using Supabase storage tasks=%s lists=%s", settings.tasks_table, settings.lists_table)
    return Stores(
        backend=BACKEND_SUPABASE,
        tasks=SupabaseTaskStore(client, settings.tasks_table),
        lists=SupabaseListStore(client, settings.lists_table),
    )


__all__ = [
    "BACKEND_LOCAL",
    "BACKEND_SUPABASE",
    "Stores",
    "build_local_stores",
    "build_stores",
]
