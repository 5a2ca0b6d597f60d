# src/zendo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The planner controller depends on Protocols instead of concrete stores.
This keeps Supabase / local storage swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol

from ..planner.models import FeedbackEvent, ProjectList, Task


class TaskRepo(Protocol):
    """
    Per-record task persistence.

    None of these raise to the caller: reads degrade to an empty list and
    write failures are logged by the implementation.
    """

    async def fetch_all(self) -> list[Task]: ...
    async def add(self, task: Task) -> None: ...
    async def update(self, task: Task) -> None: ...
    async def delete(self, task_id: str) -> None: ...


class ListRepo(Protocol):
    """
    Whole-collection list persistence.

    Methods may be sync or async. The controller awaits async ones and runs
    sync ones in a worker thread, so blocking I/O stays off the event loop.
    """

    def load_all(self) -> list[ProjectList] | Awaitable[list[ProjectList]]: ...
    def save_all(self, lists: list[ProjectList]) -> Any: ...


class FeedbackPlayer(Protocol):
    """Optional user feedback (sound, haptics, ...) for planner events."""

    def play(self, event: FeedbackEvent) -> None: ...
