"""Category persistence, always scoped to the owning user."""

from __future__ import annotations

import logging

from app.models.task import Category, utcnow
from app.repositories.errors import DuplicateRecord, RecordNotFound
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "Category with this name already exists"


class CategoryRepository:
    """CRUD over the categories table for a single caller at a time."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, user_id: str) -> list[Category]:
        stmt = select(Category).where(Category.user_id == user_id).order_by(Category.name.asc())
        return list(self.session.exec(stmt).all())

    def get(self, user_id: str, category_id: str) -> Category:
        stmt = select(Category).where(Category.id == category_id, Category.user_id == user_id)
        category = self.session.exec(stmt).first()
        if category is None:
            raise RecordNotFound("Category not found")
        return category

    def create(self, user_id: str, data: dict) -> Category:
        category = Category(user_id=user_id, **data)
        self.session.add(category)
        self._commit()
        self.session.refresh(category)
        return category

    def update(self, user_id: str, category_id: str, changes: dict) -> Category:
        category = self.get(user_id, category_id)
        for key, value in changes.items():
            setattr(category, key, value)
        category.updated_at = utcnow()
        self.session.add(category)
        self._commit()
        self.session.refresh(category)
        return category

    def delete(self, user_id: str, category_id: str) -> None:
        """Delete a category. Tasks filed under it keep existing, uncategorized."""
        category = self.get(user_id, category_id)
        self.session.delete(category)
        self.session.commit()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.debug("Category write rejected by unique constraint: %s", e.orig)
            raise DuplicateRecord(DUPLICATE_NAME_MESSAGE) from e
