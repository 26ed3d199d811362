import logging
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine, Session

from ..core.config import get_settings

logger = logging.getLogger(__name__)


def make_engine(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=False)


@lru_cache
def get_engine() -> Engine:
    return make_engine(get_settings().database_url)


def init_db(engine: Optional[Engine] = None) -> None:
    """Create the task table if it does not exist yet; safe on every startup."""
    from . import models  # noqa: F401
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    logger.debug("Schema ready url=%s", engine.url)


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Iterator[Session]:
    """Yield a session that is rolled back on error and always closed."""
    with Session(engine or get_engine()) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise

