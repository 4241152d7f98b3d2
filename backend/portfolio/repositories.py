"""Repository classes encapsulating database operations.

Each repository is small and focused on a single content table
(projects, skills, experiences, messages). Repositories return SQLModel
objects and perform commits/refreshes where appropriate. Listing order
is fixed per table so the public pages render deterministically.
"""

from typing import Any, Dict, List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from . import models


class _ContentRepository:
    """Shared get/list/create/update/delete for one table.

    Subclasses set `model` and `order_by` (a tuple of column names).
    """
    model: type = None
    order_by: tuple = ("id",)

    def __init__(self, session: Session):
        self.session = session

    def list(self) -> List[Any]:
        """Return every row in the table's defined order."""
        columns = [getattr(self.model, name) for name in self.order_by]
        stmt = select(self.model).order_by(*columns)
        return list(self.session.exec(stmt).all())

    def get(self, record_id: int) -> Optional[Any]:
        """Get a row by primary key, or `None`."""
        return self.session.get(self.model, record_id)

    def create(self, record):
        """Persist a new row and return the managed instance."""
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def update(self, record, changes: Dict[str, Any]):
        """Apply `changes` to `record` in a single commit."""
        for field, value in changes.items():
            setattr(record, field, value)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def delete(self, record) -> None:
        self.session.delete(record)
        self.session.commit()


class ProjectRepository(_ContentRepository):
    """CRUD operations for `Project` rows, oldest first."""
    model = models.Project
    order_by = ("created_at", "id")

    def get_by_slug(self, slug: str) -> Optional[models.Project]:
        """Return a `Project` by slug or `None` if not found."""
        stmt = select(models.Project).where(models.Project.slug == slug)
        return self.session.exec(stmt).first()

    def count(self) -> int:
        """Return the number of stored projects."""
        stmt = select(func.count()).select_from(models.Project)
        return self.session.exec(stmt).one()


class SkillRepository(_ContentRepository):
    """CRUD operations for `Skill` rows, grouped by category then name."""
    model = models.Skill
    order_by = ("category", "name", "id")


class ExperienceRepository(_ContentRepository):
    """CRUD operations for `Experience` rows in insertion order.

    Start dates are free text ("Jan 2024"), so they are not a usable
    sort key.
    """
    model = models.Experience
    order_by = ("id",)


class MessageRepository(_ContentRepository):
    """Inbox of contact-form messages, oldest first."""
    model = models.Message
    order_by = ("created_at", "id")
