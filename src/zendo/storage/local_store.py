# src/zendo/storage/local_store.py

"""
Local fallback persistence.

Used when no Supabase credentials are configured:
- tasks live in a small SQLite database (one row per task),
- project lists live in a JSON file that is rewritten as a whole.

Both follow the store contract: reads degrade to an empty collection and
write failures are logged, never raised to the controller.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import sqlite3
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Any

from ..planner.models import ProjectList, Task, default_lists
from .rows import row_to_task, task_to_row

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    SQLite task store.

    The schema mirrors the remote table so rows can be moved between backends
    unchanged, and is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection, so calls can run in
      worker threads via asyncio.to_thread
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("SqliteTaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL DEFAULT '',
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    schedule TEXT,
                    time TEXT,
                    list_id TEXT,
                    order_index INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskStore migration: added column %s", name)

            add_col("title", "TEXT NOT NULL DEFAULT ''")
            add_col("is_completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("schedule", "TEXT")
            add_col("time", "TEXT")
            add_col("list_id", "TEXT")
            add_col("order_index", "INTEGER NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_schedule ON tasks(schedule)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_list ON tasks(list_id)")
            conn.commit()
        finally:
            conn.close()

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def _select_all(self) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY order_index ASC").fetchall()
        finally:
            conn.close()

        out: list[Task] = []
        for r in rows:
            task = row_to_task(dict(r))
            if task is None:
                logger.warning("Skipping malformed task row id=%s", r["id"])
                continue
            out.append(task)
        return out

    def _upsert(self, task: Task) -> None:
        row = task_to_row(task)
        row["is_completed"] = 1 if row["is_completed"] else 0
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO tasks(id, title, is_completed, schedule, time, list_id, order_index)
                VALUES (:id, :title, :is_completed, :schedule, :time, :list_id, :order_index)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    is_completed = excluded.is_completed,
                    schedule = excluded.schedule,
                    time = excluded.time,
                    list_id = excluded.list_id,
                    order_index = excluded.order_index
                """,
                row,
            )
            conn.commit()
        finally:
            conn.close()

    def _delete(self, task_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM tasks WHERE id = ?", (str(task_id),))
            conn.commit()
        finally:
            conn.close()

    # ---- TaskRepo ----

    async def fetch_all(self) -> list[Task]:
        try:
            tasks = await asyncio.to_thread(self._select_all)
        except Exception:
            logger.exception("Failed to load tasks from %s", self._db_path)
            return []
        logger.debug("Loaded %d tasks from %s", len(tasks), self._db_path)
        return tasks

    async def add(self, task: Task) -> None:
        try:
            await asyncio.to_thread(self._upsert, task)
            logger.debug("Task added id=%s date=%s list_id=%s", task.id, task.date, task.list_id)
        except Exception:
            logger.exception("add failed task_id=%s", task.id)

    async def update(self, task: Task) -> None:
        try:
            await asyncio.to_thread(self._upsert, task)
            logger.debug("Task updated id=%s", task.id)
        except Exception:
            logger.exception("update failed task_id=%s", task.id)

    async def delete(self, task_id: str) -> None:
        try:
            await asyncio.to_thread(self._delete, task_id)
            logger.debug("Task deleted id=%s", task_id)
        except Exception:
            logger.exception("delete failed task_id=%s", task_id)


def _list_from_raw(raw: Any, index: int) -> ProjectList | None:
    if not isinstance(raw, dict):
        return None
    lid = raw.get("id")
    title = raw.get("title")
    if not isinstance(lid, str) or not lid or title is None:
        return None
    order = raw.get("order", index)
    try:
        order = int(order)
    except (TypeError, ValueError):
        order = index
    return ProjectList(id=lid, title=str(title), order=order)


class JsonListStore:
    """
    Project lists stored as one JSON array.

    - missing file: seed the default lists and write them out
    - unreadable / malformed file: empty collection (nothing is overwritten)

    File access runs in a worker thread (asyncio.to_thread), like the SQLite store.
    """

    def __init__(self, path: str | Path = "lists.json") -> None:
        self._path = Path(path)
        # save_all calls can finish out of order in the thread pool; only the newest may land.
        self._lock = threading.Lock()
        self._issued = 0
        self._written = 0

    def _read(self) -> list[ProjectList]:
        if not self._path.exists():
            defaults = default_lists()
            self._write(defaults)
            logger.info("Seeded default lists at %s", self._path)
            return defaults

        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to load lists from %s", self._path)
            return []

        if not isinstance(data, list):
            logger.error("Lists file %s does not hold a JSON array; ignoring it", self._path)
            return []

        out: list[ProjectList] = []
        for i, raw in enumerate(data):
            lst = _list_from_raw(raw, i)
            if lst is not None:
                out.append(lst)
        logger.info("Loaded %d lists from %s", len(out), self._path)
        return out

    def _write(self, lists: list[ProjectList], seq: int | None = None) -> None:
        with self._lock:
            if seq is not None and seq < self._written:
                logger.debug("Skipping stale lists save seq=%d (written=%d)", seq, self._written)
                return
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self._path.with_suffix(".tmp")
                tmp.write_text(
                    json.dumps([asdict(lst) for lst in lists], ensure_ascii=False, indent=2),
                    "utf-8",
                )
                os.replace(tmp, self._path)
                logger.debug("Saved %d lists to %s", len(lists), self._path)
            except Exception:
                logger.exception("Failed to save lists to %s", self._path)
                return
            if seq is not None:
                self._written = seq

    # ---- ListRepo ----

    async def load_all(self) -> list[ProjectList]:
        return await asyncio.to_thread(self._read)

    async def save_all(self, lists: list[ProjectList]) -> None:
        self._issued += 1
        await asyncio.to_thread(self._write, list(lists), self._issued)
