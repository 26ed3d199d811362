from typing import List, Optional, Tuple
from sqlalchemy import case, func, update
from sqlmodel import Session, col, select
from .models import Task, TaskStatus


def insert_task(session: Session, task: Task) -> Task:
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def find_active_by_name(session: Session, name: str) -> Optional[Task]:
    """Most recently started Active record with this exact name."""
    stmt = (
        select(Task)
        .where(Task.name == name, Task.status == TaskStatus.ACTIVE.value)
        .order_by(col(Task.start_time).desc(), col(Task.id).desc())
        .limit(1)
    )
    return session.exec(stmt).first()


def find_most_recent_active(session: Session) -> Optional[Task]:
    stmt = (
        select(Task)
        .where(Task.status == TaskStatus.ACTIVE.value)
        .order_by(col(Task.start_time).desc(), col(Task.id).desc())
        .limit(1)
    )
    return session.exec(stmt).first()


def complete_task(session: Session, task: Task, end_time: int, total_time: int) -> Task:
    task.end_time = end_time
    task.total_time = total_time
    task.status = TaskStatus.COMPLETE.value
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def count_active_started_after(session: Session, end_time: int) -> int:
    stmt = select(func.count()).select_from(Task).where(
        Task.status == TaskStatus.ACTIVE.value, col(Task.start_time) > end_time
    )
    return int(session.exec(stmt).one())


def bulk_close_active(session: Session, end_time: int) -> int:
    """Stamp a shared end time on every Active record. Does not commit.

    A record started after ``end_time`` (clock skew) is stamped with its own
    start time instead.
    """
    stmt = (
        update(Task)
        .where(col(Task.status) == TaskStatus.ACTIVE.value)
        .values(end_time=case((col(Task.start_time) > end_time, col(Task.start_time)), else_=end_time))
        .execution_options(synchronize_session=False)
    )
    return session.exec(stmt).rowcount  # type: ignore[call-overload]


def bulk_finalize_active(session: Session) -> int:
    """Compute total_time and flip status on Active records already stamped. Does not commit."""
    stmt = (
        update(Task)
        .where(col(Task.status) == TaskStatus.ACTIVE.value, col(Task.end_time).is_not(None))
        .values(
            total_time=col(Task.end_time) - col(Task.start_time),
            status=TaskStatus.COMPLETE.value,
        )
        .execution_options(synchronize_session=False)
    )
    return session.exec(stmt).rowcount  # type: ignore[call-overload]


def query_tasks(session: Session, status: Optional[TaskStatus], cutoff: int) -> List[Task]:
    stmt = select(Task).where(Task.start_time > cutoff)
    if status is not None:
        stmt = stmt.where(Task.status == status.value)
    return list(session.exec(stmt.order_by(col(Task.id))).all())


def aggregate_by_category(
    session: Session, cutoff: int, category: Optional[str] = None
) -> List[Tuple[str, int]]:
    total = func.sum(Task.total_time)
    stmt = select(Task.category, total).where(
        Task.start_time > cutoff,
        Task.status == TaskStatus.COMPLETE.value,
        col(Task.total_time).is_not(None),
    )
    if category is not None:
        stmt = stmt.where(Task.category == category)
    stmt = stmt.group_by(Task.category).order_by(total.desc(), col(Task.category))
    return [(str(cat), int(secs or 0)) for cat, secs in session.exec(stmt).all()]
