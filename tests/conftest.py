# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from zendo.planner.controller import PlannerController
from zendo.planner.models import Task

from .fakes import FakeListStore, FakeTaskStore, RecordingFeedback

# Wednesday; the week runs 2026-10-19 (Mon) .. 2026-10-23 (Fri).
NOW = datetime(2026, 10, 21, 10, 30)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap/storage.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="zendo-test",
        log_level="DEBUG",
        supabase_url=None,
        supabase_key=None,
        remote_configured=False,
        tasks_table="tasks",
        lists_table="lists",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        lists_path=tmp_path / "data" / "lists.json",
        week_days=5,
    )


@pytest.fixture()
def seed_tasks() -> list[Task]:
    return [
        Task(id="t-past", content="overdue report", order=1, date="2026-10-19", time="08:00"),
        Task(id="t-past-done", content="sent invoice", order=2, date="2026-10-20", is_completed=True),
        Task(id="t-today", content="standup", order=3, date="2026-10-21", time="15:00", list_id="list-1"),
        Task(id="t-future", content="dentist", order=4, date="2026-10-23"),
        Task(id="t-idea", content="learn piano", order=5, list_id="list-1"),
        Task(id="t-someday", content="visit Kyoto", order=6, list_id="list-2"),
    ]


@pytest.fixture()
def task_store(seed_tasks: list[Task]) -> FakeTaskStore:
    return FakeTaskStore(seed_tasks)


@pytest.fixture()
def list_store() -> FakeListStore:
    return FakeListStore()


@pytest.fixture()
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture()
def planner(task_store: FakeTaskStore, list_store: FakeListStore, feedback: RecordingFeedback) -> PlannerController:
    """Controller wired to in-memory fakes and a frozen clock (not loaded yet)."""
    return PlannerController(task_store, list_store, feedback=feedback, clock=lambda: NOW)
