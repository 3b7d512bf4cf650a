from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Priority(str, Enum):
    """Task priority levels"""
    low = "low"
    medium = "medium"
    high = "high"


class Status(str, Enum):
    """Task status options; any value may follow any other"""
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class User(SQLModel, table=True):
    """Account holding the credentials used to sign tokens"""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    display_name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    username: str = Field(max_length=255, unique=True, index=True)
    # bcrypt hash, never the plaintext
    password: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    tasks: List["Task"] = Relationship(back_populates="owner")


class Task(SQLModel, table=True):
    """Task owned by a single user"""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    estimate: Optional[float] = None
    due_date: Optional[date] = None
    priority: Priority = Field(default=Priority.medium)
    status: Status = Field(default=Status.todo)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    owner: Optional[User] = Relationship(back_populates="tasks")
    logs: List["TaskLog"] = Relationship(
        back_populates="task",
        cascade_delete=True,
        sa_relationship_kwargs={"order_by": "TaskLog.day"},
    )


class TaskLog(SQLModel, table=True):
    """Time spent on a task during one day"""
    __tablename__ = "tasklogs"
    __table_args__ = (
        UniqueConstraint("task_id", "day", name="uq_tasklogs_task_id_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="tasks.id", ondelete="CASCADE", index=True)
    day: date
    duration: float
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    task: Optional[Task] = Relationship(back_populates="logs")
