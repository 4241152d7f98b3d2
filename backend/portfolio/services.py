"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and auxiliary logic. Services are intentionally thin: they perform the
checks that need the database (slug uniqueness, existence), then persist
via repositories. Validation failures are raised as `ValueError`; a
missing record is reported by returning `None`/`False` so controllers
can translate it to 404.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories
from .config import settings

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ADMIN_ROLE = "admin"
ADMIN_SUBJECT = "admin"

logger = logging.getLogger("portfolio.services")


class AuthService:
    """Shared-secret admin login and token handling.

    There is exactly one privileged identity. `login` trades the admin
    password for a signed token; `verify` checks a token and returns its
    claims. Neither raises for bad input.
    """

    def check_password(self, password: str) -> bool:
        """Compare `password` with the configured admin secret.

        When `ADMIN_PASSWORD_HASH` is set the password is verified against
        that passlib hash, otherwise it must equal `ADMIN_PASSWORD` exactly.
        """
        if not isinstance(password, str) or not password:
            return False
        if settings.ADMIN_PASSWORD_HASH:
            try:
                return PWD_CTX.verify(password, settings.ADMIN_PASSWORD_HASH)
            except ValueError:
                logger.error("ADMIN_PASSWORD_HASH is not a recognised passlib hash")
                return False
        return hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))

    def issue_token(self, expires_delta: Optional[timedelta] = None) -> str:
        """Sign an admin token valid for `expires_delta` (default `JWT_EXPIRE_HOURS`)."""
        if expires_delta is None:
            expires_delta = timedelta(hours=settings.JWT_EXPIRE_HOURS)
        now = datetime.now(timezone.utc)
        payload = {
            "sub": ADMIN_SUBJECT,
            "role": ADMIN_ROLE,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    def login(self, password: str) -> Optional[str]:
        """Return a signed token for the correct password, `None` otherwise."""
        if not self.check_password(password):
            return None
        return self.issue_token()

    def verify(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Decode and verify a token.

        Returns the claims for a well-signed, unexpired admin token and
        `None` for anything else (malformed, tampered, expired, wrong role).
        """
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError:
            return None
        if payload.get("role") != ADMIN_ROLE:
            return None
        return payload


class _ContentService:
    """Generic list/get/create/update/delete over one repository."""
    repository_class = None
    model = None

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_class(session)

    def list(self) -> List[Any]:
        return self.repo.list()

    def get(self, record_id: int):
        return self.repo.get(record_id)

    def create(self, data: Dict[str, Any]):
        """Build a row from already-validated `data` and persist it."""
        return self.repo.create(self.model(**data))

    def update(self, record_id: int, changes: Dict[str, Any]):
        """Apply a partial update; returns `None` when the id does not exist."""
        record = self.repo.get(record_id)
        if record is None:
            return None
        if not changes:
            return record
        return self.repo.update(record, changes)

    def delete(self, record_id: int) -> bool:
        """Delete by id; returns False when there was nothing to delete."""
        record = self.repo.get(record_id)
        if record is None:
            return False
        self.repo.delete(record)
        return True


class ProjectService(_ContentService):
    """Projects with globally unique slugs."""
    repository_class = repositories.ProjectRepository
    model = models.Project

    def get_by_slug(self, slug: str) -> Optional[models.Project]:
        return self.repo.get_by_slug(slug)

    def create(self, data: Dict[str, Any]) -> models.Project:
        self._ensure_slug_free(data.get("slug"))
        return self._commit_guarded(lambda: super(ProjectService, self).create(data))

    def update(self, record_id: int, changes: Dict[str, Any]) -> Optional[models.Project]:
        if self.repo.get(record_id) is None:
            return None
        if "slug" in changes:
            self._ensure_slug_free(changes["slug"], exclude_id=record_id)
        return self._commit_guarded(lambda: super(ProjectService, self).update(record_id, changes))

    def _ensure_slug_free(self, slug: Optional[str], exclude_id: Optional[int] = None):
        existing = self.repo.get_by_slug(slug) if slug else None
        if existing is not None and existing.id != exclude_id:
            raise ValueError("slug already exists")

    def _commit_guarded(self, operation):
        # A concurrent insert can still hit the unique index between the
        # check and the commit.
        try:
            return operation()
        except IntegrityError:
            self.session.rollback()
            raise ValueError("slug already exists")


class SkillService(_ContentService):
    repository_class = repositories.SkillRepository
    model = models.Skill


class ExperienceService(_ContentService):
    repository_class = repositories.ExperienceRepository
    model = models.Experience


class MessageService(_ContentService):
    """Contact messages: created by visitors, only the read flag changes afterwards."""
    repository_class = repositories.MessageRepository
    model = models.Message

    def create(self, data: Dict[str, Any]) -> models.Message:
        fields = {k: data[k] for k in ("sender_name", "sender_email", "subject", "message")}
        return self.repo.create(models.Message(read=False, **fields))

    def set_read(self, message_id: int, read: bool) -> Optional[models.Message]:
        return self.update(message_id, {"read": read})
