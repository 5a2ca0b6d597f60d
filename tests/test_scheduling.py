# tests/test_scheduling.py

from __future__ import annotations

import pytest

from zendo.planner.models import DateDestination, ListDestination, Task, TimeBlock, parse_destination
from zendo.planner.scheduling import apply_move, resolve_move


def _task(time: str | None = None, list_id: str | None = "list-1", date: str | None = None) -> Task:
    return Task(id="t1", content="write report", order=1000, date=date, time=time, list_id=list_id)


def test_date_destination_sets_date_and_keeps_back_reference() -> None:
    updates = resolve_move(_task(list_id="list-9"), "2026-10-22")
    assert updates == {"date": "2026-10-22"}

    moved = apply_move(_task(list_id="list-9"), "2026-10-22")
    assert moved.date == "2026-10-22"
    assert moved.list_id == "list-9"


def test_list_destination_clears_schedule() -> None:
    task = _task(time="15:00", date="2026-10-22", list_id="list-1")
    updates = resolve_move(task, "list-2")
    assert updates == {"list_id": "list-2", "date": None, "time": None}


def test_list_destination_ignores_time_block() -> None:
    updates = resolve_move(_task(time="15:00"), "list-2", TimeBlock.MORNING)
    assert updates == {"list_id": "list-2", "date": None, "time": None}


@pytest.mark.parametrize(
    ("current", "block", "expected"),
    [
        ("08:00", "evening", "14:00"),
        (None, "evening", "16:00"),
        ("20:00", "morning", "09:00"),
        ("14:00", "morning", "09:00"),
        (None, "morning", "09:00"),
        ("10:00", "morning", "10:00"),
        ("13:59", "morning", "13:59"),
        ("15:30", "evening", "15:30"),
    ],
)
def test_time_block_snapping(current: str | None, block: str, expected: str) -> None:
    moved = apply_move(_task(time=current), "2026-10-22", block)
    assert moved.time == expected


def test_no_time_block_leaves_time_alone() -> None:
    assert "time" not in resolve_move(_task(time="20:00"), "2026-10-22")
    assert "time" not in resolve_move(_task(time=None), "2026-10-22")


def test_unparsable_time_is_left_untouched() -> None:
    assert "time" not in resolve_move(_task(time="noon"), "2026-10-22", "morning")
    assert "time" not in resolve_move(_task(time="noon"), "2026-10-22", "evening")


def test_loose_time_text_uses_its_leading_hour() -> None:
    assert "time" not in resolve_move(_task(time="14h"), "2026-10-22", "evening")
    assert resolve_move(_task(time="14h"), "2026-10-22", "morning")["time"] == "09:00"


def test_repeated_morning_moves_converge() -> None:
    task = _task(time="21:15")
    first = apply_move(task, "2026-10-22", "morning")
    assert first.time == "09:00"
    second = apply_move(first, "2026-10-22", "morning")
    assert second == first
    assert resolve_move(second, "2026-10-22", "morning") == {"date": "2026-10-22"}


def test_move_never_touches_identity_fields() -> None:
    task = Task(id="t1", content="c", order=42, is_completed=True, time="08:00")
    for dest, block in (("2026-10-22", "evening"), ("list-3", None), ("2026-10-22", None)):
        updates = resolve_move(task, dest, block)
        assert not {"id", "content", "is_completed", "order"} & updates.keys()
        moved = apply_move(task, dest, block)
        assert (moved.id, moved.content, moved.is_completed, moved.order) == ("t1", "c", True, 42)


def test_destination_detection_is_exact() -> None:
    assert parse_destination("2026-10-22") == DateDestination("2026-10-22")
    assert parse_destination("2026-1-5") == ListDestination("2026-1-5")
    assert parse_destination("2026-10-22x") == ListDestination("2026-10-22x")
    assert parse_destination("list-1") == ListDestination("list-1")
    assert parse_destination("2026-10-22\n") == ListDestination("2026-10-22\n")
    assert parse_destination(" 2026-10-22") == ListDestination(" 2026-10-22")
    assert parse_destination("２０２６-10-22") == ListDestination("２０２６-10-22")


def test_explicit_list_destination_wins_over_date_shape() -> None:
    # A list whose id looks like a date is still a list once tagged at the boundary.
    updates = resolve_move(_task(time="10:00"), ListDestination("2026-10-22"))
    assert updates == {"list_id": "2026-10-22", "date": None, "time": None}


def test_invalid_inputs_raise() -> None:
    with pytest.raises(ValueError):
        resolve_move(_task(), "2026-10-22", "afternoon")
    with pytest.raises(ValueError):
        parse_destination("")
