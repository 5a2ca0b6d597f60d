# src/zendo/planner/scheduling.py

from __future__ import annotations

"""
Scheduling engine.

Computes the field changes caused by moving a task to a day (optionally into
a morning/evening block) or into a project list. Pure: the caller merges the
result onto the task.
"""

from dataclasses import replace
from typing import Any

from .models import DateDestination, Destination, ListDestination, Task, TimeBlock, parse_destination
from .views import EVENING_START_HOUR, hour_of

MORNING_TIME = "09:00"
EVENING_BOUNDARY_TIME = "14:00"
EVENING_DEFAULT_TIME = "16:00"

# Hour assumed for a task without a time when comparing against a block.
_DEFAULT_HOUR = 9


def _time_for_block(current: str | None, block: TimeBlock) -> str | None:
    """New time for a task dropped into `block`, or None to leave it untouched."""
    if not current:
        return MORNING_TIME if block is TimeBlock.MORNING else EVENING_DEFAULT_TIME

    hour = hour_of(current)
    if hour is None:
        return None

    if block is TimeBlock.MORNING and hour >= EVENING_START_HOUR:
        return MORNING_TIME
    if block is TimeBlock.EVENING and hour < EVENING_START_HOUR:
        return EVENING_BOUNDARY_TIME
    return None


def resolve_move(
    task: Task,
    destination: Destination | str,
    time_block: TimeBlock | str | None = None,
) -> dict[str, Any]:
    """
    Return the partial update for moving `task` to `destination`.

    Day destination: set date, keep list_id as back-reference, and snap the
    time into the requested block if it falls outside it.
    List destination: set list_id and drop date and time.
    """
    dest = parse_destination(destination)
    block = TimeBlock.parse(time_block)

    if isinstance(dest, ListDestination):
        return {"list_id": dest.list_id, "date": None, "time": None}

    assert isinstance(dest, DateDestination)
    updates: dict[str, Any] = {"date": dest.date}
    if block is not None:
        new_time = _time_for_block(task.time, block)
        if new_time is not None:
            updates["time"] = new_time
    return updates


def apply_move(
    task: Task,
    destination: Destination | str,
    time_block: TimeBlock | str | None = None,
) -> Task:
    return replace(task, **resolve_move(task, destination, time_block))
