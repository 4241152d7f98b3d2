"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. JSON uses camelCase field names
(`techStack`, `senderEmail`); snake_case names are accepted on input too.

Create payloads (`*In`) carry the full set of rules. Partial updates
(`*Update`) apply the same rules to whichever fields are present and
refuse an explicit `null` for a column that cannot be empty.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _reject_null(value):
    if value is None:
        raise ValueError("field may not be null")
    return value


class SkillCategory(str, Enum):
    """Fixed set of skill groups shown on the skills section."""
    FRONTEND = "Frontend"
    BACKEND = "Backend"
    DEVOPS = "DevOps"
    TOOLS = "Tools"


# --- auth ---

class LoginIn(BaseModel):
    """Payload for the admin login endpoint."""
    password: str


class LoginOut(BaseModel):
    """Successful login response carrying the bearer token."""
    success: bool = True
    token: str


class AuthCheckOut(BaseModel):
    authenticated: bool
    role: Optional[str] = None


class SuccessOut(BaseModel):
    """Plain acknowledgment returned by logout and delete endpoints."""
    success: bool = True


# --- projects ---

class ProjectIn(CamelModel):
    """Request format for creating a project."""
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: str
    content: str
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: List[str] = Field(default_factory=list)
    featured: bool = False


class ProjectUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    featured: Optional[bool] = None

    @field_validator("title", "slug", "description", "content", "tech_stack", "featured")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ProjectOut(CamelModel):
    id: int
    title: str
    slug: str
    description: str
    content: str
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    tech_stack: List[str]
    featured: bool
    created_at: datetime


# --- skills ---

class SkillIn(CamelModel):
    """Request format for creating a skill. Proficiency is a 0-100 percentage."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1)
    category: SkillCategory
    icon_url: Optional[str] = None
    proficiency: int = Field(default=50, ge=0, le=100, strict=True)


class SkillUpdate(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[SkillCategory] = None
    icon_url: Optional[str] = None
    proficiency: Optional[int] = Field(default=None, ge=0, le=100, strict=True)

    @field_validator("name", "category", "proficiency")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class SkillOut(CamelModel):
    id: int
    name: str
    category: str
    icon_url: Optional[str] = None
    proficiency: int


# --- experiences ---

class ExperienceIn(CamelModel):
    """Request format for creating an experience; omit `endDate` for a current role."""
    company: str = Field(min_length=1)
    role: str = Field(min_length=1)
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    description: str
    achievements: List[str] = Field(default_factory=list)


class ExperienceUpdate(CamelModel):
    company: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    start_date: Optional[str] = Field(default=None, min_length=1)
    end_date: Optional[str] = None
    description: Optional[str] = None
    achievements: Optional[List[str]] = None

    @field_validator("company", "role", "start_date", "description", "achievements")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ExperienceOut(CamelModel):
    id: int
    company: str
    role: str
    start_date: str
    end_date: Optional[str] = None
    description: str
    achievements: List[str]


# --- messages ---

class MessageIn(CamelModel):
    """Contact form submission. `read`, `id` and `createdAt` are server-owned and ignored."""
    sender_name: str = Field(min_length=2)
    sender_email: EmailStr
    subject: str = Field(min_length=3)
    message: str = Field(min_length=10)


class MessageReadUpdate(CamelModel):
    """The only mutable attribute of a message is its read flag."""
    read: bool


class MessageOut(CamelModel):
    id: int
    sender_name: str
    sender_email: str
    subject: str
    message: str
    read: bool
    created_at: datetime
