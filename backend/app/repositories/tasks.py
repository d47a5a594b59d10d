"""Task persistence, always scoped to the owning user.

Every statement carries ``Task.user_id == user_id``; a row owned by someone
else is reported exactly like a missing row.
"""

from __future__ import annotations

from datetime import datetime

from app.models.schemas import TaskQuery
from app.models.task import PRIORITY_RANK, Category, Task, utcnow
from app.repositories.errors import ConstraintViolation, RecordNotFound
from sqlalchemy import case
from sqlmodel import Session, select


class TaskRepository:
    """CRUD and reporting queries over the tasks table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, user_id: str, query: TaskQuery | None = None) -> list[Task]:
        """List the caller's tasks, filtered and sorted per ``query``.

        Defaults to newest first. Priority sorts by rank (low < medium < high),
        and tasks without a due date go last whichever way due_date is sorted.
        """
        query = query or TaskQuery()
        stmt = select(Task).where(Task.user_id == user_id)

        if query.status:
            stmt = stmt.where(Task.status == query.status)
        if query.priority:
            stmt = stmt.where(Task.priority == query.priority)
        if query.category_id:
            stmt = stmt.where(Task.category_id == query.category_id)

        ascending = query.order == "asc"
        sort = query.sort or "created_at"
        if sort == "priority":
            key = case(PRIORITY_RANK, value=Task.priority, else_=0)
            stmt = stmt.order_by(key.asc() if ascending else key.desc())
        elif sort == "due_date":
            key = Task.due_date.asc() if ascending else Task.due_date.desc()
            stmt = stmt.order_by(key.nulls_last())
        else:
            stmt = stmt.order_by(Task.created_at.asc() if ascending else Task.created_at.desc())

        if sort != "created_at":
            stmt = stmt.order_by(Task.created_at.desc())

        return list(self.session.exec(stmt).all())

    def get(self, user_id: str, task_id: str) -> Task:
        stmt = select(Task).where(Task.id == task_id, Task.user_id == user_id)
        task = self.session.exec(stmt).first()
        if task is None:
            raise RecordNotFound("Task not found")
        return task

    def create(self, user_id: str, data: dict) -> Task:
        self._check_category(user_id, data.get("category_id"))
        task = Task(user_id=user_id, **data)
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def update(self, user_id: str, task_id: str, changes: dict) -> Task:
        task = self.get(user_id, task_id)
        if "category_id" in changes:
            self._check_category(user_id, changes["category_id"])
        for key, value in changes.items():
            setattr(task, key, value)
        task.updated_at = utcnow()
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def delete(self, user_id: str, task_id: str) -> None:
        task = self.get(user_id, task_id)
        self.session.delete(task)
        self.session.commit()

    def list_completed(
        self,
        user_id: str,
        since: datetime,
        until: datetime,
    ) -> list[tuple[Task, str | None]]:
        """Done tasks completed within [since, until], newest first, with category name."""
        stmt = (
            select(Task, Category.name)
            .join(
                Category,
                (Task.category_id == Category.id) & (Category.user_id == user_id),
                isouter=True,
            )
            .where(
                Task.user_id == user_id,
                Task.status == "done",
                Task.completed_at >= since,
                Task.completed_at <= until,
            )
            .order_by(Task.completed_at.desc())
        )
        return [(task, name) for task, name in self.session.exec(stmt).all()]

    def _check_category(self, user_id: str, category_id: str | None) -> None:
        if category_id is None:
            return
        stmt = select(Category.id).where(Category.id == category_id, Category.user_id == user_id)
        if self.session.exec(stmt).first() is None:
            raise ConstraintViolation("Category not found")
