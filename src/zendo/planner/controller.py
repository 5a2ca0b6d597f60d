# src/zendo/planner/controller.py

from __future__ import annotations

"""
Planner state controller.

Holds the in-memory tasks and lists for the session and applies every user
intent optimistically:
- the in-memory collection changes synchronously, so views see it at once,
- the matching store call runs as a background asyncio task (or, when the
  caller has no running loop, on a worker thread with its own loop).

Persistence is fire-and-forget: a failed write is logged and the in-memory
state is kept as the user left it (no rollback, no retry).
"""

import asyncio
import inspect
import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from ..core.feedback import NullFeedback
from ..core.ports import FeedbackPlayer, ListRepo, TaskRepo
from . import views
from .models import (
    DateDestination,
    Destination,
    FeedbackEvent,
    ProjectList,
    Task,
    TimeBlock,
    parse_destination,
)
from .scheduling import resolve_move

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _new_id() -> str:
    return uuid.uuid4().hex


async def _call_store(call: Callable[..., Any], *args: Any) -> Any:
    """Await async store methods; run sync ones (blocking file I/O) in a worker thread."""
    if inspect.iscoroutinefunction(call):
        return await call(*args)
    result = await asyncio.to_thread(call, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


class PlannerController:
    def __init__(
        self,
        task_store: TaskRepo,
        list_store: ListRepo,
        *,
        feedback: FeedbackPlayer | None = None,
        clock: Clock = datetime.now,
        week_day_count: int = 5,
    ) -> None:
        self._task_store = task_store
        self._list_store = list_store
        self._feedback: FeedbackPlayer = feedback or NullFeedback()
        self._clock = clock
        self._week_day_count = week_day_count

        self.tasks: list[Task] = []
        self.lists: list[ProjectList] = []
        self.loaded = False

        self._pending: set[asyncio.Task[Any]] = set()
        self._threads: set[threading.Thread] = set()

    # ---- clock ----

    def today(self) -> date:
        return self._clock().date()

    def today_iso(self) -> str:
        return self.today().isoformat()

    def _now_ms(self) -> int:
        try:
            return int(self._clock().timestamp() * 1000)
        except (OverflowError, OSError, ValueError):
            return int(time.time() * 1000)

    # ---- persistence plumbing ----

    def _persist(self, what: str, call: Callable[..., Any], *args: Any) -> None:
        """Run a store call without waiting for it. Failures are logged, never raised."""

        async def _run() -> None:
            try:
                await _call_store(call, *args)
            except Exception:
                logger.exception("Persistence failed: %s", what)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (plain sync caller): the write gets its own loop on a worker thread.
            self._threads = {t for t in self._threads if t.is_alive()}
            worker = threading.Thread(target=asyncio.run, args=(_run(),), name=f"persist:{what}")
            self._threads.add(worker)
            worker.start()
            logger.debug("No running loop; persisting on thread %s", worker.name)
            return

        bg = loop.create_task(_run(), name=f"persist:{what}")
        self._pending.add(bg)
        bg.add_done_callback(self._pending.discard)

    @property
    def pending_writes(self) -> int:
        return len(self._pending) + sum(1 for t in self._threads if t.is_alive())

    def flush(self, timeout: float | None = None) -> None:
        """Block until writes issued outside an event loop have finished."""
        for t in list(self._threads):
            t.join(timeout)
        self._threads = {t for t in self._threads if t.is_alive()}

    async def drain(self) -> None:
        """Wait until every write issued so far has finished."""
        while True:
            pending = [t for t in self._pending if not t.done()]
            workers = [t for t in self._threads if t.is_alive()]
            if not pending and not workers:
                return
            if workers:
                await asyncio.to_thread(self.flush)
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    def _save_lists(self) -> None:
        snapshot = list(self.lists)
        self._persist(f"save lists n={len(snapshot)}", self._list_store.save_all, snapshot)

    def _play(self, event: FeedbackEvent) -> None:
        try:
            self._feedback.play(event)
        except Exception:
            logger.debug("Feedback play failed event=%s", event, exc_info=True)

    # ---- loading ----

    async def load(self) -> None:
        """Populate tasks and lists from the stores once per session."""
        if self.loaded:
            logger.debug("Planner already loaded; ignoring load()")
            return

        tasks = await self._task_store.fetch_all()

        lists = await _call_store(self._list_store.load_all)

        self.tasks = list(tasks or [])
        self.lists = list(lists or [])
        self.loaded = True
        logger.info("Planner loaded tasks=%d lists=%d", len(self.tasks), len(self.lists))

    # ---- lookups ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                return i
        return None

    def get_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self.tasks[idx]

    def _replace_task(self, idx: int, new_task: Task) -> Task:
        self.tasks[idx] = new_task
        self._persist(f"update task_id={new_task.id}", self._task_store.update, new_task)
        return new_task

    # ---- task intents ----

    def add_task(
        self,
        content: str,
        destination: Destination | str,
        time: str | None = None,
        list_id: str | None = None,
    ) -> Task:
        text = (content or "").strip()
        if not text:
            raise ValueError("content is required")

        dest = parse_destination(destination)
        if isinstance(dest, DateDestination):
            task = Task(
                id=_new_id(),
                content=text,
                order=self._now_ms(),
                date=dest.date,
                time=time or None,
                list_id=list_id or None,
            )
        else:
            task = Task(
                id=_new_id(),
                content=text,
                order=self._now_ms(),
                list_id=list_id or dest.list_id,
            )

        self.tasks.append(task)
        logger.debug("Task added id=%s date=%s list_id=%s", task.id, task.date, task.list_id)
        self._persist(f"add task_id={task.id}", self._task_store.add, task)
        return task

    def toggle_task(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        self._play(FeedbackEvent.CHECK)
        current = self.tasks[idx]
        return self._replace_task(idx, replace(current, is_completed=not current.is_completed))

    def delete_task(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self.tasks[idx]
        self._persist(f"delete task_id={task_id}", self._task_store.delete, task_id)
        return True

    def update_task(self, task_id: str, content: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        return self._replace_task(idx, replace(self.tasks[idx], content=content))

    def begin_drag(self, task_id: str) -> Task | None:
        """Pick a task up. Only plays the cue; nothing moves until move_task."""
        task = self.get_task(task_id)
        if task is None:
            return None
        self._play(FeedbackEvent.DRAG_START)
        return task

    def move_task(
        self,
        task_id: str,
        destination: Destination | str,
        time_block: TimeBlock | str | None = None,
    ) -> Task | None:
        dest = parse_destination(destination)
        block = TimeBlock.parse(time_block)

        idx = self._index_of(task_id)
        if idx is None:
            return None

        current = self.tasks[idx]
        updates = resolve_move(current, dest, block)
        moved = self._replace_task(idx, replace(current, **updates))
        self._play(FeedbackEvent.DRAG_END)
        logger.debug("Task moved id=%s updates=%s", task_id, updates)
        return moved

    def push_unfinished_to_today(self) -> list[Task]:
        today = self.today_iso()
        changed: list[Task] = []
        for idx, t in enumerate(self.tasks):
            if views.is_unfinished_past(t, today):
                changed.append(self._replace_task(idx, replace(t, date=today)))
        if changed:
            logger.info("Pushed %d unfinished tasks to %s", len(changed), today)
        return changed

    # ---- list intents ----

    def add_list(self, title: str) -> ProjectList:
        text = (title or "").strip()
        if not text:
            raise ValueError("title is required")
        lst = ProjectList(id=_new_id(), title=text, order=len(self.lists))
        self.lists.append(lst)
        self._save_lists()
        return lst

    def delete_list(self, list_id: str) -> bool:
        before = len(self.lists)
        self.lists = [lst for lst in self.lists if lst.id != list_id]
        removed = len(self.lists) != before

        released = 0
        for idx, t in enumerate(self.tasks):
            if t.list_id == list_id:
                self._replace_task(idx, replace(t, list_id=None))
                released += 1

        if removed:
            self._save_lists()
        logger.debug("List deleted id=%s removed=%s released_tasks=%d", list_id, removed, released)
        return removed

    # ---- read helpers for views ----

    def week_days(self) -> list[views.DayColumn]:
        return views.week_days(self._clock(), self._week_day_count)

    def day_split(self, day: str) -> views.DaySplit:
        return views.split_day(views.tasks_for_day(self.tasks, day))

    def list_tasks(self, list_id: str) -> list[Task]:
        return views.tasks_for_list(self.tasks, list_id)

    def list_for_task(self, task: Task) -> ProjectList | None:
        return views.find_list(self.lists, task.list_id)

    def month_grid(self, year: int, month: int) -> views.MonthGrid:
        return views.month_grid(year, month, self.tasks, self.today())

    def has_unfinished_past(self) -> bool:
        return views.has_unfinished_past(self.tasks, self.today_iso())
