# src/zendo/bootstrap.py

"""
Composition root.

- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend (Supabase or local fallback),
- wires stores and the feedback player into a PlannerController.

Front ends call `open_session()` and then forward user intents to
`state.planner`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from .config import get_settings
from .core.feedback import NullFeedback
from .core.ports import FeedbackPlayer
from .core.state import AppState
from .logging_setup import setup_logging
from .planner.controller import PlannerController
from .storage import build_stores

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.lists_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    feedback: FeedbackPlayer | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    stores = build_stores(settings)
    player = feedback or NullFeedback()
    planner = PlannerController(
        stores.tasks,
        stores.lists,
        feedback=player,
        clock=clock,
        week_day_count=int(getattr(settings, "week_days", 5)),
    )

    return AppState(
        settings=settings,
        backend=stores.backend,
        task_store=stores.tasks,
        list_store=stores.lists,
        feedback=player,
        planner=planner,
    )


def _configure_logging(settings) -> None:
    # console level from settings.log_level, log file next to the local data
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logger.info("Logging to %s", log_file)


async def open_session(
    *,
    settings=None,
    feedback: FeedbackPlayer | None = None,
    clock: Callable[[], datetime] = datetime.now,
    configure_logging: bool = False,
) -> AppState:
    """
    Build the state and load tasks/lists from the selected backend.

    Hosts without their own logging config pass configure_logging=True.
    """
    if settings is None:
        settings = get_settings()
    if configure_logging:
        _configure_logging(settings)

    state = create_initial_state(settings=settings, feedback=feedback, clock=clock)
    await state.planner.load()
    logger.info(
        "Session ready backend=%s tasks=%d lists=%d",
        state.backend,
        len(state.planner.tasks),
        len(state.planner.lists),
    )
    return state


async def close_session(state: AppState) -> None:
    """Best-effort shutdown: wait for in-flight writes (no exceptions should escape)."""
    try:
        await state.planner.drain()
    except Exception:
        logger.exception("Failed to flush pending writes.")
