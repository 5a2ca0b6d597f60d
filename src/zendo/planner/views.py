# src/zendo/planner/views.py

"""
Derived views over the task collection.

Everything here is a pure function of its inputs: day columns for the week
grid, the morning/evening split of a day, project list contents and the
month calendar. Nothing mutates tasks.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .models import ProjectList, Task, TimeBlock

EVENING_START_HOUR = 14

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True, slots=True)
class DayColumn:
    date: str
    label: str
    is_today: bool
    is_past: bool


@dataclass(slots=True)
class DaySplit:
    morning: list[Task] = field(default_factory=list)
    evening: list[Task] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MonthDay:
    day: int
    date: str
    has_tasks: bool
    is_today: bool


@dataclass(frozen=True, slots=True)
class MonthGrid:
    year: int
    month: int
    days_in_month: int
    leading_blanks: int
    cells: list[MonthDay]

    @property
    def title(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


# ---- week grid ----


def week_start(now: date | datetime) -> date:
    """Monday of the current week. Sunday counts as the 7th day of the week before."""
    today = _as_date(now)
    return today - timedelta(days=today.weekday())


def week_days(now: date | datetime, count: int = 5) -> list[DayColumn]:
    today_iso = _as_date(now).isoformat()
    start = week_start(now)
    out: list[DayColumn] = []
    for i in range(max(0, int(count))):
        d = start + timedelta(days=i)
        iso = d.isoformat()
        out.append(
            DayColumn(
                date=iso,
                label=WEEKDAY_NAMES[d.weekday()],
                is_today=iso == today_iso,
                is_past=iso < today_iso,
            )
        )
    return out


# ---- morning / evening ----


_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def hour_of(time_str: str | None) -> int | None:
    """
    Hour of an HH:mm string: the leading integer, so "14h" and "9" work too.
    None when missing or when there is no leading number.
    """
    if not time_str:
        return None
    m = _LEADING_INT.match(time_str)
    return int(m.group(1)) if m else None


def time_block_of(task: Task) -> TimeBlock:
    hour = hour_of(task.time)
    if hour is not None and hour >= EVENING_START_HOUR:
        return TimeBlock.EVENING
    return TimeBlock.MORNING


def split_day(tasks: Iterable[Task]) -> DaySplit:
    split = DaySplit()
    for t in tasks:
        if time_block_of(t) is TimeBlock.EVENING:
            split.evening.append(t)
        else:
            split.morning.append(t)
    return split


# ---- buckets ----


def tasks_for_day(tasks: Iterable[Task], day: str) -> list[Task]:
    return [t for t in tasks if t.date == day]


def tasks_for_list(tasks: Iterable[Task], list_id: str) -> list[Task]:
    """Tasks shown under a project list: scheduled tasks never show here."""
    return [t for t in tasks if t.list_id == list_id and not t.is_scheduled]


def find_list(lists: Iterable[ProjectList], list_id: str | None) -> ProjectList | None:
    if not list_id:
        return None
    for lst in lists:
        if lst.id == list_id:
            return lst
    return None


# ---- month calendar ----


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + int(delta)
    return idx // 12, idx % 12 + 1


def month_grid(year: int, month: int, tasks: Iterable[Task], today: date | datetime) -> MonthGrid:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")

    days_in_month = calendar.monthrange(year, month)[1]
    # Monday-first: Monday -> 0 ... Sunday -> 6
    leading_blanks = date(year, month, 1).weekday()

    busy_dates = {t.date for t in tasks if t.date and not t.is_completed}
    today_iso = _as_date(today).isoformat()

    cells: list[MonthDay] = []
    for day in range(1, days_in_month + 1):
        iso = f"{year:04d}-{month:02d}-{day:02d}"
        cells.append(
            MonthDay(day=day, date=iso, has_tasks=iso in busy_dates, is_today=iso == today_iso)
        )

    return MonthGrid(
        year=year,
        month=month,
        days_in_month=days_in_month,
        leading_blanks=leading_blanks,
        cells=cells,
    )


# ---- past-due ----


def is_unfinished_past(task: Task, today: str) -> bool:
    # Zero-padded ISO dates order correctly as plain strings.
    return bool(task.date) and task.date < today and not task.is_completed  # type: ignore[operator]


def has_unfinished_past(tasks: Iterable[Task], today: str) -> bool:
    return any(is_unfinished_past(t, today) for t in tasks)
