"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the portfolio content API.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses.

Endpoints implemented:
- GET /api/projects, GET /api/projects/{slug}
- GET /api/skills
- GET /api/experiences
- POST /api/messages
- POST /api/admin/login, POST /api/admin/logout, GET /api/admin/check
- GET/POST /api/admin/{projects|skills|experiences}
- GET/PATCH/DELETE /api/admin/{projects|skills|experiences}/{id}
- GET /api/admin/messages, PATCH/DELETE /api/admin/messages/{id}
- GET /health
"""

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from . import services
from .auth import optional_admin, require_admin
from .config import settings
from .database import create_db_and_tables, engine, get_session
from .schemas import (
    AuthCheckOut,
    ExperienceIn,
    ExperienceOut,
    ExperienceUpdate,
    LoginIn,
    LoginOut,
    MessageIn,
    MessageOut,
    MessageReadUpdate,
    ProjectIn,
    ProjectOut,
    ProjectUpdate,
    SkillIn,
    SkillOut,
    SkillUpdate,
    SuccessOut,
)
from .seed import seed_database
from .utils.rate_limit import InMemoryRateLimiter, client_key

app = FastAPI(title="Portfolio Content API")
logger = logging.getLogger("portfolio.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)
_contact_rate_limiter = InMemoryRateLimiter()
_login_rate_limiter = InMemoryRateLimiter()

# Wide-open CORS keeps a separately served frontend working in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()
if settings.SEED_ON_STARTUP:
    with Session(engine) as _seed_session:
        seed_database(_seed_session)


def _log_request(level: int, event: str, request: Request, **fields):
    record = {
        "request_id": getattr(request.state, "request_id", ""),
        "path": request.url.path,
        "method": request.method,
        "client": request.client.host if request.client else "unknown",
    }
    record.update(fields)
    logger.log(level, "%s %s", event, json.dumps(record, ensure_ascii=True))


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps({"request_id": req_id, "path": request.url.path, "duration_ms": elapsed_ms}, ensure_ascii=True),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith("/api"):
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        _log_request(logging.INFO, "request_done", request, status_code=response.status_code, duration_ms=elapsed_ms)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed payloads as 400 with a generic message."""
    _log_request(logging.INFO, "validation_failed", request, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"detail": "invalid data"})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("storage_error request_id=%s: %s", getattr(request.state, "request_id", ""), exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


def _enforce_rate_limit(limiter: InMemoryRateLimiter, request: Request, max_requests: int) -> None:
    allowed, retry_after = limiter.allow(client_key(request), max_requests, settings.RATE_LIMIT_WINDOW_SECONDS)
    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"rate limit exceeded; retry after {retry_after}s",
            headers={"Retry-After": str(retry_after)},
        )


def _found(record, what: str):
    if record is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return record


def _deleted(ok: bool, what: str) -> Dict[str, bool]:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return {"success": True}


# --- public content ---

@app.get("/api/projects", response_model=List[ProjectOut])
def list_projects(db: Session = Depends(get_session)):
    """List every project, oldest first.

    Filtering by tech tag is left to the client, which receives the full set.
    """
    return services.ProjectService(db).list()


@app.get("/api/projects/{slug}", response_model=ProjectOut)
def get_project(slug: str, db: Session = Depends(get_session)):
    """Fetch a single project by its slug."""
    return _found(services.ProjectService(db).get_by_slug(slug), "project")


@app.get("/api/skills", response_model=List[SkillOut])
def list_skills(db: Session = Depends(get_session)):
    """List skills ordered by category then name."""
    return services.SkillService(db).list()


@app.get("/api/experiences", response_model=List[ExperienceOut])
def list_experiences(db: Session = Depends(get_session)):
    return services.ExperienceService(db).list()


@app.post("/api/messages", response_model=MessageOut)
def submit_message(payload: MessageIn, request: Request, db: Session = Depends(get_session)):
    """Store a contact-form message.

    The payload is validated before anything is written; the stored
    message always starts unread.
    """
    _enforce_rate_limit(_contact_rate_limiter, request, settings.CONTACT_RATE_LIMIT_PER_MIN)
    message = services.MessageService(db).create(payload.model_dump())
    _log_request(logging.INFO, "message_received", request, message_id=message.id)
    return message


# --- admin session ---

@app.post("/api/admin/login", response_model=LoginOut)
def admin_login(payload: LoginIn, request: Request):
    """Exchange the admin password for a bearer token valid for `JWT_EXPIRE_HOURS`."""
    _enforce_rate_limit(_login_rate_limiter, request, settings.LOGIN_RATE_LIMIT_PER_MIN)
    token = services.AuthService().login(payload.password)
    if not token:
        _log_request(logging.WARNING, "admin_login_failed", request)
        raise HTTPException(status_code=401, detail="invalid password")
    _log_request(logging.INFO, "admin_login", request)
    return {"success": True, "token": token}


@app.post("/api/admin/logout", response_model=SuccessOut)
def admin_logout():
    """Acknowledge a logout.

    Tokens are not tracked server-side; the client forgets its token and
    it stays valid until it expires.
    """
    return {"success": True}


@app.get("/api/admin/check", response_model=AuthCheckOut, response_model_exclude_none=True)
def admin_check(claims: Optional[Dict[str, Any]] = Depends(optional_admin)):
    """Report whether the request carries a valid admin token."""
    if claims is None:
        return {"authenticated": False}
    return {"authenticated": True, "role": claims.get("role")}


# --- admin: projects ---

@app.get("/api/admin/projects", response_model=List[ProjectOut])
def admin_list_projects(db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return services.ProjectService(db).list()


@app.get("/api/admin/projects/{project_id}", response_model=ProjectOut)
def admin_get_project(project_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _found(services.ProjectService(db).get(project_id), "project")


@app.post("/api/admin/projects", response_model=ProjectOut)
def create_project(payload: ProjectIn, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """Create a project. A slug already used by another project is rejected with 400."""
    try:
        return services.ProjectService(db).create(payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.patch("/api/admin/projects/{project_id}", response_model=ProjectOut)
def update_project(project_id: int, payload: ProjectUpdate, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """Apply a partial update and return the resulting project."""
    try:
        project = services.ProjectService(db).update(project_id, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _found(project, "project")


@app.delete("/api/admin/projects/{project_id}", response_model=SuccessOut)
def delete_project(project_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _deleted(services.ProjectService(db).delete(project_id), "project")


# --- admin: skills ---

@app.get("/api/admin/skills", response_model=List[SkillOut])
def admin_list_skills(db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return services.SkillService(db).list()


@app.get("/api/admin/skills/{skill_id}", response_model=SkillOut)
def admin_get_skill(skill_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _found(services.SkillService(db).get(skill_id), "skill")


@app.post("/api/admin/skills", response_model=SkillOut)
def create_skill(payload: SkillIn, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """Create a skill. Proficiency outside 0-100 fails validation (400)."""
    return services.SkillService(db).create(payload.model_dump())


@app.patch("/api/admin/skills/{skill_id}", response_model=SkillOut)
def update_skill(skill_id: int, payload: SkillUpdate, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    skill = services.SkillService(db).update(skill_id, payload.model_dump(exclude_unset=True))
    return _found(skill, "skill")


@app.delete("/api/admin/skills/{skill_id}", response_model=SuccessOut)
def delete_skill(skill_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _deleted(services.SkillService(db).delete(skill_id), "skill")


# --- admin: experiences ---

@app.get("/api/admin/experiences", response_model=List[ExperienceOut])
def admin_list_experiences(db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return services.ExperienceService(db).list()


@app.get("/api/admin/experiences/{experience_id}", response_model=ExperienceOut)
def admin_get_experience(experience_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _found(services.ExperienceService(db).get(experience_id), "experience")


@app.post("/api/admin/experiences", response_model=ExperienceOut)
def create_experience(payload: ExperienceIn, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return services.ExperienceService(db).create(payload.model_dump())


@app.patch("/api/admin/experiences/{experience_id}", response_model=ExperienceOut)
def update_experience(experience_id: int, payload: ExperienceUpdate, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """Apply a partial update. Sending `endDate: null` marks the role as current."""
    experience = services.ExperienceService(db).update(experience_id, payload.model_dump(exclude_unset=True))
    return _found(experience, "experience")


@app.delete("/api/admin/experiences/{experience_id}", response_model=SuccessOut)
def delete_experience(experience_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _deleted(services.ExperienceService(db).delete(experience_id), "experience")


# --- admin: messages ---

@app.get("/api/admin/messages", response_model=List[MessageOut])
def admin_list_messages(db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """List the contact inbox, oldest first."""
    return services.MessageService(db).list()


@app.patch("/api/admin/messages/{message_id}", response_model=MessageOut)
def update_message(message_id: int, payload: MessageReadUpdate, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    """Set the read flag; no other message attribute can change."""
    return _found(services.MessageService(db).set_read(message_id, payload.read), "message")


@app.delete("/api/admin/messages/{message_id}", response_model=SuccessOut)
def delete_message(message_id: int, db: Session = Depends(get_session), _admin: dict = Depends(require_admin)):
    return _deleted(services.MessageService(db).delete(message_id), "message")


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Portfolio API</title>
      <style>
        body { font-family: Arial, sans-serif; margin: 32px; }
        a { color: #0a6; }
        .card { max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }
      </style>
    </head>
    <body>
      <div class="card">
        <h1>Portfolio Content API</h1>
        <p>Quick links for local testing:</p>
        <ul>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="/api/projects">Projects</a></li>
          <li><a href="/api/skills">Skills</a></li>
          <li><a href="/api/experiences">Experiences</a></li>
        </ul>
        <p>Use <code>/api/admin/login</code> to get a token, then send it as <code>Authorization: Bearer &lt;token&gt;</code> to the <code>/api/admin/*</code> endpoints.</p>
      </div>
    </body>
    </html>
    """


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
