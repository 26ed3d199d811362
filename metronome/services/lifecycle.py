"""Start/end transitions for task records.

A record is created Active and moves to Complete exactly once. Ending by
name closes the most recently started Active record with that name; a
record that is already Complete is never reopened or recomputed.
"""
import logging
import time
from typing import Optional

from sqlmodel import Session

from ..core.errors import InvalidInputError, NotFoundError
from ..db import crud
from ..db.models import DEFAULT_CATEGORY, Task, TaskStatus
from ..schemas.duration import Duration
from ..schemas.tasks import EndAllResult, EndResult, StartResult
from .formatting import format_timestamp

logger = logging.getLogger(__name__)


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else int(now)


def _require_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidInputError("Task name must not be empty.")
    return name


def start_task(
    session: Session, name: str, category: Optional[str] = None, now: Optional[int] = None
) -> StartResult:
    name = _require_name(name)
    category = category or DEFAULT_CATEGORY
    start_time = _now(now)

    task = crud.insert_task(
        session,
        Task(name=name, category=category, start_time=start_time, status=TaskStatus.ACTIVE.value),
    )
    logger.info('Task "%s" started at %s!', name, format_timestamp(start_time))
    return StartResult(id=task.id, name=task.name, category=task.category, start_time=task.start_time)


def _close(session: Session, task: Task, now: Optional[int]) -> EndResult:
    end_time = _now(now)
    if end_time < task.start_time:
        logger.warning(
            "Task id=%s ends before it started (end=%s start=%s); clamping duration to 0",
            task.id,
            end_time,
            task.start_time,
        )
        end_time = task.start_time
    total_time = end_time - task.start_time

    task = crud.complete_task(session, task, end_time, total_time)
    duration = Duration.from_seconds(total_time)
    logger.info('Task "%s" ended after %s', task.name, duration)
    return EndResult(
        id=task.id,
        name=task.name,
        start_time=task.start_time,
        end_time=end_time,
        total_time=total_time,
        duration=duration,
    )


def end_task(session: Session, name: str, now: Optional[int] = None) -> EndResult:
    name = _require_name(name)
    task = crud.find_active_by_name(session, name)
    if task is None:
        raise NotFoundError(f'No active task named "{name}".')
    return _close(session, task, now)


def end_last(session: Session, now: Optional[int] = None) -> EndResult:
    task = crud.find_most_recent_active(session)
    if task is None:
        raise NotFoundError("There are no active tasks.")
    return _close(session, task, now)


def end_all_active(session: Session, now: Optional[int] = None) -> EndAllResult:
    """Close every Active record with one shared end time, in a single transaction."""
    end_time = _now(now)
    try:
        skewed = crud.count_active_started_after(session, end_time)
        if skewed:
            logger.warning(
                "%d active tasks start after %s; clamping their duration to 0", skewed, end_time
            )
        count = crud.bulk_close_active(session, end_time)
        crud.bulk_finalize_active(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.expire_all()
    logger.info("Ended %d active tasks at %s.", count, format_timestamp(end_time))
    return EndAllResult(count=count, end_time=end_time)
