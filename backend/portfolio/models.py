"""SQLModel data models.

This module defines the portfolio's database tables using SQLModel.
The four content tables are independent of each other: there are no
foreign keys or relationships between them. List-valued attributes
(tech stack, achievements) are stored as JSON columns so their order
is preserved.
"""

from typing import List, Optional
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(SQLModel, table=True):
    """A portfolio project.

    Fields:
    - `slug`: globally unique, URL-friendly identifier used by the public detail page
    - `content`: long-form write-up shown on the detail page
    - `tech_stack`: ordered list of technology tags (display order matters)
    """
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    slug: str = Field(index=True, nullable=False, unique=True)
    description: str
    content: str
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    featured: bool = False
    created_at: datetime = Field(default_factory=_utcnow)


class Skill(SQLModel, table=True):
    """A skill shown in the skills grid, grouped by `category`."""
    __tablename__ = "skills"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    category: str = Field(index=True)
    icon_url: Optional[str] = None
    proficiency: int = 50


class Experience(SQLModel, table=True):
    """A work or education entry. A missing `end_date` means "present"."""
    __tablename__ = "experiences"

    id: Optional[int] = Field(default=None, primary_key=True)
    company: str
    role: str
    start_date: str
    end_date: Optional[str] = None
    description: str
    achievements: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class Message(SQLModel, table=True):
    """A message submitted through the public contact form."""
    __tablename__ = "messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    sender_name: str
    sender_email: str
    subject: str
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
