# tests/test_local_store.py

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path

import pytest

from zendo.planner.models import ProjectList, Task
from zendo.storage.local_store import JsonListStore, SqliteTaskStore


@pytest.mark.asyncio
async def test_sqlite_task_add_update_delete(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")

    scheduled = Task(id="a", content="gym", order=2, date="2026-10-22", time="07:30", list_id="list-1")
    listed = Task(id="b", content="read", order=1, list_id="list-2")
    await store.add(scheduled)
    await store.add(listed)

    loaded = await store.fetch_all()
    assert loaded == [listed, scheduled]  # ordered by order_index

    await store.update(Task(id="a", content="gym", order=2, is_completed=True, list_id="list-1"))
    by_id = {t.id: t for t in await store.fetch_all()}
    assert by_id["a"].is_completed is True
    assert by_id["a"].date is None
    assert by_id["a"].time is None

    await store.delete("b")
    await store.delete("missing")
    assert [t.id for t in await store.fetch_all()] == ["a"]
    assert store.count_tasks() == 1


@pytest.mark.asyncio
async def test_sqlite_update_for_unknown_id_inserts(tmp_path: Path) -> None:
    store = SqliteTaskStore(tmp_path / "tasks.sqlite3")
    await store.update(Task(id="late", content="x", order=5))
    assert [t.id for t in await store.fetch_all()] == ["late"]


@pytest.mark.asyncio
async def test_sqlite_writes_nulls_for_unset_fields(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    await store.add(Task(id="a", content="loose", order=1))

    conn = sqlite3.connect(db)
    try:
        row = conn.execute("SELECT schedule, time, list_id FROM tasks WHERE id = 'a'").fetchone()
    finally:
        conn.close()
    assert row == (None, None, None)


@pytest.mark.asyncio
async def test_sqlite_corrupt_file_loads_empty(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = SqliteTaskStore(db)
    db.write_bytes(b"this is not a database" * 100)

    assert await store.fetch_all() == []
    # Writes fail quietly too.
    await store.add(Task(id="a", content="x", order=1))


def test_sqlite_migrates_old_schema(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT NOT NULL DEFAULT '')")
    conn.execute("INSERT INTO tasks(id, title) VALUES ('old', 'legacy')")
    conn.commit()
    conn.close()

    SqliteTaskStore(db)

    conn = sqlite3.connect(db)
    try:
        cols = {row[1] for row in conn.execute("PRAGMA table_info(tasks)")}
    finally:
        conn.close()
    assert {"is_completed", "schedule", "time", "list_id", "order_index"} <= cols


@pytest.mark.asyncio
async def test_json_lists_seed_defaults_when_missing(tmp_path: Path) -> None:
    path = tmp_path / "lists.json"
    store = JsonListStore(path)

    lists = await store.load_all()

    assert [(lst.title, lst.order) for lst in lists] == [("Ideas", 0), ("Someday", 1)]
    assert json.loads(path.read_text("utf-8"))[0]["title"] == "Ideas"


@pytest.mark.asyncio
async def test_json_lists_round_trip(tmp_path: Path) -> None:
    store = JsonListStore(tmp_path / "lists.json")
    lists = [ProjectList(id="x", title="Garden", order=0), ProjectList(id="y", title="Music", order=3)]
    await store.save_all(lists)
    assert await store.load_all() == lists
    assert not (tmp_path / "lists.tmp").exists()


@pytest.mark.asyncio
async def test_json_lists_corrupt_file_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "lists.json"
    path.write_text("{not json", "utf-8")

    assert await JsonListStore(path).load_all() == []
    # Not reseeded over the user's (broken) data.
    assert path.read_text("utf-8") == "{not json"


@pytest.mark.asyncio
async def test_json_lists_skip_malformed_entries(tmp_path: Path) -> None:
    path = tmp_path / "lists.json"
    path.write_text(
        json.dumps([{"id": "ok", "title": "Fine", "order": "2"}, {"title": "no id"}, 7, {"id": "z", "title": "T"}]),
        "utf-8",
    )
    lists = await JsonListStore(path).load_all()
    assert lists == [ProjectList(id="ok", title="Fine", order=2), ProjectList(id="z", title="T", order=3)]


@pytest.mark.asyncio
async def test_json_lists_non_array_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "lists.json"
    path.write_text(json.dumps({"lists": []}), "utf-8")
    assert await JsonListStore(path).load_all() == []


@pytest.mark.asyncio
async def test_json_lists_file_io_runs_off_the_loop(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    threads: list[int] = []
    original = JsonListStore._write

    def recording_write(self: JsonListStore, lists: list[ProjectList], seq: int | None = None) -> None:
        threads.append(threading.get_ident())
        original(self, lists, seq)

    monkeypatch.setattr(JsonListStore, "_write", recording_write)
    store = JsonListStore(tmp_path / "lists.json")

    await store.save_all([ProjectList(id="x", title="Garden", order=0)])

    assert threads and threads[0] != threading.get_ident()


def test_json_lists_late_stale_save_does_not_overwrite(tmp_path: Path) -> None:
    store = JsonListStore(tmp_path / "lists.json")
    newer = [ProjectList(id="a", title="A", order=0), ProjectList(id="b", title="B", order=1)]
    older = [ProjectList(id="a", title="A", order=0)]

    # The second save finished first in the thread pool.
    store._write(newer, seq=2)
    store._write(older, seq=1)

    assert [row["id"] for row in json.loads((tmp_path / "lists.json").read_text("utf-8"))] == ["a", "b"]
