# src/zendo/storage/supabase_store.py

"""
Supabase-backed stores.

The supabase client is synchronous, so every query runs in a worker thread
via asyncio.to_thread and never blocks the event loop.
"""

from __future__ import annotations

import asyncio
import logging

from supabase import Client  # type: ignore

from ..planner.models import ProjectList, Task, default_lists
from .rows import list_to_row, row_to_list, row_to_task, task_to_row

logger = logging.getLogger(__name__)


class SupabaseTaskStore:
    """Per-record task persistence in a Supabase table."""

    def __init__(self, client: Client, table_name: str = "tasks") -> None:
        self._client = client
        self._table_name = table_name

    def _select_all(self) -> list[Task]:
        response = (
            self._client.table(self._table_name)
            .select("*")
            .order("order_index", desc=False)
            .execute()
        )
        out: list[Task] = []
        for item in response.data or []:
            task = row_to_task(item) if isinstance(item, dict) else None
            if task is None:
                logger.warning("Skipping malformed task row: %r", item)
                continue
            out.append(task)
        return out

    def _insert(self, task: Task) -> None:
        self._client.table(self._table_name).insert(task_to_row(task)).execute()

    def _upsert(self, task: Task) -> None:
        self._client.table(self._table_name).upsert(task_to_row(task)).execute()

    def _delete(self, task_id: str) -> None:
        self._client.table(self._table_name).delete().eq("id", task_id).execute()

    async def fetch_all(self) -> list[Task]:
        try:
            tasks = await asyncio.to_thread(self._select_all)
        except Exception:
            logger.exception("Failed to fetch tasks from table=%s", self._table_name)
            return []
        logger.info("Fetched %d tasks from table=%s", len(tasks), self._table_name)
        return tasks

    async def add(self, task: Task) -> None:
        try:
            await asyncio.to_thread(self._insert, task)
            logger.debug("Task added id=%s", task.id)
        except Exception:
            logger.exception("add failed task_id=%s table=%s", task.id, self._table_name)

    async def update(self, task: Task) -> None:
        # Full-record overwrite; upsert so an update racing ahead of its add still lands.
        try:
            await asyncio.to_thread(self._upsert, task)
            logger.debug("Task updated id=%s", task.id)
        except Exception:
            logger.exception("update failed task_id=%s table=%s", task.id, self._table_name)

    async def delete(self, task_id: str) -> None:
        try:
            await asyncio.to_thread(self._delete, task_id)
            logger.debug("Task deleted id=%s", task_id)
        except Exception:
            logger.exception("delete failed task_id=%s table=%s", task_id, self._table_name)


class SupabaseListStore:
    """Project lists in a Supabase table, saved as a whole collection."""

    def __init__(self, client: Client, table_name: str = "lists") -> None:
        self._client = client
        self._table_name = table_name

    def _select_all(self) -> list[ProjectList]:
        response = (
            self._client.table(self._table_name)
            .select("*")
            .order("order_index", desc=False)
            .execute()
        )
        out: list[ProjectList] = []
        for item in response.data or []:
            lst = row_to_list(item) if isinstance(item, dict) else None
            if lst is not None:
                out.append(lst)
        return out

    def _replace_all(self, lists: list[ProjectList]) -> None:
        table = self._client.table
        keep = {lst.id for lst in lists}
        if lists:
            table(self._table_name).upsert([list_to_row(lst) for lst in lists]).execute()

        existing = table(self._table_name).select("id").execute()
        stale = [row["id"] for row in existing.data or [] if row.get("id") not in keep]
        if stale:
            table(self._table_name).delete().in_("id", stale).execute()

    async def load_all(self) -> list[ProjectList]:
        try:
            lists = await asyncio.to_thread(self._select_all)
        except Exception:
            logger.exception("Failed to fetch lists from table=%s", self._table_name)
            return []

        if not lists:
            lists = default_lists()
            await self.save_all(lists)
            logger.info("Seeded default lists in table=%s", self._table_name)
        return lists

    async def save_all(self, lists: list[ProjectList]) -> None:
        snapshot = list(lists)
        try:
            await asyncio.to_thread(self._replace_all, snapshot)
            logger.debug("Saved %d lists to table=%s", len(snapshot), self._table_name)
        except Exception:
            logger.exception("save_all failed table=%s", self._table_name)
