import logging
from datetime import date
from typing import List

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from errors import NotFoundError
from models import Task, TaskLog, User, utcnow
from schemas import (
    LogTimeRequest,
    TaskCreate,
    TaskDetailResponse,
    TaskLogResponse,
    TaskResponse,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found."

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def total_logged_time(task: Task) -> float:
    return float(sum(log.duration for log in task.logs))


def serialize_task(task: Task) -> TaskDetailResponse:
    """Task with its logs and the aggregate of their durations"""
    return TaskDetailResponse(
        **TaskResponse.model_validate(task).model_dump(),
        logs=[TaskLogResponse.model_validate(log) for log in task.logs],
        total_logged_time=total_logged_time(task),
    )


def get_owned_task(session: Session, owner: User, task_id: int) -> Task:
    """
    Load a task belonging to `owner`

    Raises:
        NotFoundError: If the task is absent or owned by someone else
    """
    task = session.get(Task, task_id)

    if not task or task.user_id != owner.id:
        raise NotFoundError(TASK_NOT_FOUND)

    return task


def create_task(session: Session, owner: User, data: TaskCreate) -> Task:
    task = Task(user_id=owner.id, **data.model_dump(exclude_none=True))

    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info("User %s created task %s", owner.id, task.id)
    return task


def list_tasks(session: Session, owner: User) -> List[TaskDetailResponse]:
    query = (
        select(Task)
        .where(Task.user_id == owner.id)
        .options(selectinload(Task.logs))
        .order_by(Task.id)
    )
    tasks = session.exec(query).all()
    return [serialize_task(task) for task in tasks]


def get_task(session: Session, owner: User, task_id: int) -> TaskDetailResponse:
    return serialize_task(get_owned_task(session, owner, task_id))


def update_task(
    session: Session, owner: User, task_id: int, data: TaskUpdate
) -> TaskDetailResponse:
    """Merge the provided fields into the task; null or omitted fields keep their value"""
    task = get_owned_task(session, owner, task_id)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(task, field, value)
    task.updated_at = utcnow()

    session.add(task)
    session.commit()
    session.refresh(task)

    return serialize_task(task)


def delete_task(session: Session, owner: User, task_id: int) -> None:
    task = get_owned_task(session, owner, task_id)

    session.delete(task)
    session.commit()

    logger.info("User %s deleted task %s", owner.id, task_id)


def _upsert_log(session: Session, task_id: int, day: date, duration: float) -> None:
    now = utcnow()
    dialect = session.get_bind().dialect.name
    insert = UPSERT_INSERTS.get(dialect)

    if insert is not None:
        table = TaskLog.__table__
        stmt = insert(table).values(
            task_id=task_id,
            day=day,
            duration=duration,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.task_id, table.c.day],
            set_={
                "duration": table.c.duration + stmt.excluded.duration,
                "updated_at": now,
            },
        )
        session.exec(stmt)
        return

    # No native upsert: lock the existing row for the rest of the transaction
    log = session.exec(
        select(TaskLog)
        .where(TaskLog.task_id == task_id, TaskLog.day == day)
        .with_for_update()
    ).first()

    if log:
        log.duration += duration
        log.updated_at = now
    else:
        log = TaskLog(task_id=task_id, day=day, duration=duration)
    session.add(log)


def log_time(
    session: Session, owner: User, task_id: int, data: LogTimeRequest
) -> TaskLog:
    """
    Add `duration` to the task's log for `day` (today by default)

    A second call for the same day increments the existing entry.
    """
    task = get_owned_task(session, owner, task_id)
    day = data.day or date.today()

    _upsert_log(session, task.id, day, data.duration)
    session.commit()

    log = session.exec(
        select(TaskLog).where(TaskLog.task_id == task.id, TaskLog.day == day)
    ).one()

    logger.info("Logged %s on task %s for %s", data.duration, task.id, day)
    return log
