import logging
import time
from typing import Optional, Union

from sqlmodel import Session

from ..db import crud
from ..db.models import TaskStatus
from ..schemas.duration import Duration
from ..schemas.tasks import CategoryTotal, CategoryTotals, TaskList, TaskOut, WindowOut
from .timefilter import TimeFilter, resolve

logger = logging.getLogger(__name__)

Selector = Union[TimeFilter, str, None]


def _window(selector: Selector, now: Optional[int]):
    return resolve(selector, int(time.time()) if now is None else int(now))


def _list(session: Session, status: Optional[TaskStatus], selector: Selector, now: Optional[int]) -> TaskList:
    window = _window(selector, now)
    rows = crud.query_tasks(session, status, window.cutoff)
    logger.debug("Listed %d tasks status=%s cutoff=%s", len(rows), status, window.cutoff)
    return TaskList(
        window=WindowOut(**window._asdict()),
        count=len(rows),
        tasks=[TaskOut.model_validate(r) for r in rows],
    )


def list_active(session: Session, selector: Selector = None, now: Optional[int] = None) -> TaskList:
    return _list(session, TaskStatus.ACTIVE, selector, now)


def list_complete(session: Session, selector: Selector = None, now: Optional[int] = None) -> TaskList:
    return _list(session, TaskStatus.COMPLETE, selector, now)


def list_all(session: Session, selector: Selector = None, now: Optional[int] = None) -> TaskList:
    return _list(session, None, selector, now)


def sum_by_category(
    session: Session,
    selector: Selector = None,
    category: Optional[str] = None,
    now: Optional[int] = None,
) -> CategoryTotals:
    """Total time of Complete records per category, largest first."""
    window = _window(selector, now)
    category = category or None
    rows = crud.aggregate_by_category(session, window.cutoff, category)
    return CategoryTotals(
        window=WindowOut(**window._asdict()),
        category=category,
        totals=[
            CategoryTotal(category=cat, total_seconds=secs, duration=Duration.from_seconds(secs))
            for cat, secs in rows
        ],
    )
