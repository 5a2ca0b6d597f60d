# src/zendo/storage/rows.py

"""Row mapping between Task / ProjectList and the stored table layout."""

from __future__ import annotations

from typing import Any

from ..planner.models import ProjectList, Task

# Task attribute -> column
TASK_COLUMNS: dict[str, str] = {
    "id": "id",
    "content": "title",
    "is_completed": "is_completed",
    "date": "schedule",
    "list_id": "list_id",
    "order": "order_index",
    "time": "time",
}


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def task_to_row(task: Task) -> dict[str, Any]:
    """Every column is present; unset optionals are written as None (null), never omitted."""
    return {
        "id": task.id,
        "title": task.content,
        "is_completed": bool(task.is_completed),
        "schedule": task.date or None,
        "list_id": task.list_id or None,
        "order_index": int(task.order),
        "time": task.time or None,
    }


def row_to_task(row: dict[str, Any]) -> Task | None:
    """Build a Task from a stored row; None when the row cannot be a task."""
    tid = row.get("id")
    if tid is None or str(tid).strip() == "":
        return None

    try:
        order = int(row.get("order_index") or 0)
    except (TypeError, ValueError):
        order = 0

    schedule = _opt_str(row.get("schedule"))
    if schedule is not None:
        # timestamp/date columns may come back as "YYYY-MM-DDT..."
        schedule = schedule[:10]

    time = _opt_str(row.get("time"))
    if time is not None and len(time) == 8 and time[2] == ":" and time[5] == ":":
        # postgres `time` columns come back as HH:MM:SS
        time = time[:5]

    return Task(
        id=str(tid),
        content=str(row.get("title") or ""),
        is_completed=bool(row.get("is_completed")),
        date=schedule,
        time=time,
        list_id=_opt_str(row.get("list_id")),
        order=order,
    )


def list_to_row(lst: ProjectList) -> dict[str, Any]:
    return {"id": lst.id, "title": lst.title, "order_index": int(lst.order)}


def row_to_list(row: dict[str, Any]) -> ProjectList | None:
    lid = row.get("id")
    if lid is None or str(lid).strip() == "":
        return None
    try:
        order = int(row.get("order_index") or 0)
    except (TypeError, ValueError):
        order = 0
    return ProjectList(id=str(lid), title=str(row.get("title") or ""), order=order)
