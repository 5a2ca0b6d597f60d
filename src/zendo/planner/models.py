# src/zendo/planner/models.py

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class TimeBlock(StrEnum):
    """Coarse partition of a day: morning is before 14:00, evening from 14:00."""

    MORNING = "morning"
    EVENING = "evening"

    @classmethod
    def parse(cls, raw: TimeBlock | str | None) -> TimeBlock | None:
        if raw is None or raw == "":
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"unknown time block: {raw!r}") from None


class FeedbackEvent(StrEnum):
    CHECK = "check"
    DRAG_START = "drag_start"
    DRAG_END = "drag_end"


@dataclass(slots=True)
class Task:
    id: str
    content: str
    order: int
    is_completed: bool = False

    # ISO YYYY-MM-DD; set iff the task sits on a day column.
    date: str | None = None
    # HH:mm, 24h. Only meaningful together with date.
    time: str | None = None
    # Project list. Kept as a back-reference while the task is scheduled.
    list_id: str | None = None

    @property
    def is_scheduled(self) -> bool:
        return bool(self.date)


@dataclass(slots=True)
class ProjectList:
    id: str
    title: str
    order: int


DEFAULT_LISTS: tuple[tuple[str, str], ...] = (
    ("list-1", "Ideas"),
    ("list-2", "Someday"),
)


def default_lists() -> list[ProjectList]:
    return [ProjectList(id=lid, title=title, order=i) for i, (lid, title) in enumerate(DEFAULT_LISTS)]


# ---- destinations ----


@dataclass(frozen=True, slots=True)
class DateDestination:
    date: str


@dataclass(frozen=True, slots=True)
class ListDestination:
    list_id: str


Destination = DateDestination | ListDestination


def is_iso_date(value: str | None) -> bool:
    # fullmatch, not match(...$): a trailing newline must not pass.
    return bool(value) and DATE_PATTERN.fullmatch(value) is not None  # type: ignore[arg-type]


def parse_destination(raw: Destination | str) -> Destination:
    """
    Decide once whether a raw drop target is a day or a project list.

    A string that is exactly YYYY-MM-DD (nothing before or after) is a day;
    every other string is a list id.
    """
    if isinstance(raw, (DateDestination, ListDestination)):
        return raw
    if not isinstance(raw, str) or not raw:
        raise ValueError(f"invalid destination: {raw!r}")
    if is_iso_date(raw):
        return DateDestination(raw)
    return ListDestination(raw)
