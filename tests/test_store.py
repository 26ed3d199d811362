from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect
from sqlmodel import Session

from metronome.db import crud
from metronome.db.models import Task, TaskStatus
from metronome.db.session import init_db, make_engine, session_scope


def test_init_db_is_idempotent(tmp_path: Path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'nested' / 'dir' / 'tasks.db'}")
    init_db(engine)
    init_db(engine)

    cols = {c["name"] for c in inspect(engine).get_columns("tasks")}
    assert cols == {"id", "name", "start_time", "end_time", "total_time", "category", "status"}
    engine.dispose()


def test_insert_assigns_increasing_ids(session: Session) -> None:
    a = crud.insert_task(session, Task(name="a", start_time=1))
    b = crud.insert_task(session, Task(name="b", start_time=2))
    assert a.id is not None and b.id is not None
    assert b.id > a.id
    assert a.status == TaskStatus.ACTIVE.value


def test_bulk_phases_share_one_transaction(engine) -> None:
    with Session(engine) as s:
        crud.insert_task(s, Task(name="a", start_time=100))
        crud.insert_task(s, Task(name="b", start_time=200))

    with Session(engine) as s:
        assert crud.bulk_close_active(s, 1000) == 2
        s.rollback()

    with Session(engine) as s:
        rows = crud.query_tasks(s, TaskStatus.ACTIVE, 0)
        assert [r.end_time for r in rows] == [None, None]

        crud.bulk_close_active(s, 1000)
        assert crud.bulk_finalize_active(s) == 2
        s.commit()

    with Session(engine) as s:
        rows = crud.query_tasks(s, None, 0)
        assert [(r.end_time, r.total_time, r.status) for r in rows] == [
            (1000, 900, "Complete"),
            (1000, 800, "Complete"),
        ]


def test_session_scope_rolls_back_on_error(engine) -> None:
    try:
        with session_scope(engine) as s:
            s.add(Task(name="lost", start_time=1))
            s.flush()
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    with session_scope(engine) as s:
        assert crud.query_tasks(s, None, 0) == []
