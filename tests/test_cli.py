from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from metronome.cli import build_parser, main
from metronome.db import crud


@pytest.fixture()
def db(tmp_path: Path, isolated_settings) -> str:
    return str(tmp_path / "cli.db")


def test_start_list_end_total(db: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", db, "start", "Write docs", "-c", "Docs"]) == 0
    assert 'Task "Write docs" started at' in capsys.readouterr().out

    assert main(["--db", db, "list", "--active"]) == 0
    out = capsys.readouterr().out
    assert "Write docs" in out
    assert "1 task(s)" in out

    assert main(["--db", db, "end", "Write docs"]) == 0
    assert 'Task "Write docs" ended at' in capsys.readouterr().out

    assert main(["--db", db, "list", "--completed", "-f", "D"]) == 0
    out = capsys.readouterr().out
    assert "last day" in out
    assert "Write docs" in out

    assert main(["--db", db, "total"]) == 0
    out = capsys.readouterr().out
    assert "CATEGORY" in out and "Docs" in out


def test_end_unknown_task_fails(db: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", db, "end", "nothing"]) == 1
    assert 'No active task named "nothing"' in capsys.readouterr().err


def test_end_last_and_all(db: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", db, "end", "--last"]) == 1
    main(["--db", db, "start", "one"])
    main(["--db", db, "start", "two"])
    main(["--db", db, "start", "three"])
    capsys.readouterr()

    assert main(["--db", db, "end", "-l"]) == 0
    assert main(["--db", db, "end", "--all"]) == 0
    assert "Ended 2 active tasks" in capsys.readouterr().out

    assert main(["--db", db, "list", "-a"]) == 0
    assert "No tasks found." in capsys.readouterr().out


def test_default_database_comes_from_settings(isolated_settings, capsys) -> None:
    assert main(["start", "configured"]) == 0
    assert (isolated_settings.DATA_DIR / "tasks.db").exists()


def test_parser_rejects_bad_input() -> None:
    parser = build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["list", "-f", "decade"])
    with pytest.raises(SystemExit):
        parser.parse_args(["end", "x", "--all"])
    with pytest.raises(SystemExit):
        parser.parse_args(["end"])
    with pytest.raises(SystemExit):
        parser.parse_args(["start", " "])


def test_store_failure_exits_with_database_error(
    db: str, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    main(["--db", db, "start", "one"])
    capsys.readouterr()

    real_close = crud.bulk_close_active

    def broken_close(session, end_time: int) -> int:
        raise OperationalError("UPDATE tasks", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "bulk_close_active", broken_close)

    assert main(["--db", db, "end", "--all"]) == 2
    captured = capsys.readouterr()
    assert "Database error:" in captured.err
    assert "database is locked" in captured.err

    monkeypatch.setattr(crud, "bulk_close_active", real_close)
    assert main(["--db", db, "list", "-a"]) == 0
    assert "1 task(s)" in capsys.readouterr().out
