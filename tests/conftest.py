from __future__ import annotations

import logging
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlmodel import Session

from metronome.core.config import get_settings
from metronome.db.session import get_engine, init_db, make_engine


@pytest.fixture()
def engine(tmp_path: Path) -> Engine:
    """Fresh SQLite file per test, schema created."""
    eng = make_engine(f"sqlite:///{tmp_path / 'tasks.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine: Engine) -> Session:
    with Session(engine) as s:
        yield s


@pytest.fixture()
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the cached settings and engine at a temp data dir."""
    monkeypatch.setenv("METRONOME_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("METRONOME_DATABASE_URL", raising=False)
    monkeypatch.delenv("METRONOME_LOG_FILE", raising=False)
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield get_settings()
    get_engine().dispose()
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Entry points reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in before and not type(h).__module__.startswith("_pytest"):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
