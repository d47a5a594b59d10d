"""Task and Category storage models."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Literal
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as SQLField
from sqlmodel import SQLModel

TaskStatus = Literal["todo", "in_progress", "done"]
TaskPriority = Literal["low", "medium", "high"]

# Sort rank for ORDER BY priority
PRIORITY_RANK: dict[str, int] = {"low": 1, "medium": 2, "high": 3}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(SQLModel, table=True):
    """A user-owned label that tasks can be filed under."""

    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_categories_user_name"),)

    id: str = SQLField(default_factory=lambda: str(uuid4()), primary_key=True)
    user_id: str = SQLField(index=True)
    name: str = SQLField(max_length=100)
    color: str | None = None  # "#RGB" or "#RRGGBB"
    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)


class Task(SQLModel, table=True):
    """A single to-do item owned by one user."""

    __tablename__ = "tasks"

    id: str = SQLField(default_factory=lambda: str(uuid4()), primary_key=True)
    user_id: str = SQLField(index=True)
    title: str = SQLField(max_length=255)
    description: str | None = None
    status: str = "todo"  # "todo" | "in_progress" | "done"
    priority: str = "medium"  # "low" | "medium" | "high"
    due_date: date | None = None
    category_id: str | None = SQLField(default=None, foreign_key="categories.id", ondelete="SET NULL")
    completed_at: datetime | None = None  # Set while status == "done"
    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)
