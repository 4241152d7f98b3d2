import os
import tempfile
from pathlib import Path

import pytest

# Configure the app before anything imports `portfolio.config`.
_DB_PATH = Path(tempfile.gettempdir()) / f"portfolio_test_{os.getpid()}.db"
os.environ["ENV"] = "dev"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["ADMIN_PASSWORD"] = "test-admin-password"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ.pop("ADMIN_PASSWORD_HASH", None)

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables and fresh rate limiters."""
    from sqlmodel import SQLModel
    from portfolio import models  # noqa: F401
    from portfolio import main
    from portfolio.database import engine

    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    main._contact_rate_limiter.reset()
    main._login_rate_limiter.reset()
    yield


@pytest.fixture(scope="session", autouse=True)
def remove_db_file():
    yield
    from portfolio.database import engine

    engine.dispose()
    if _DB_PATH.exists():
        try:
            _DB_PATH.unlink()
        except OSError:
            pass


@pytest.fixture
def db_session():
    from sqlmodel import Session
    from portfolio.database import engine

    with Session(engine) as session:
        yield session


@pytest.fixture
def admin_headers():
    from fastapi.testclient import TestClient
    from portfolio.main import app

    r = TestClient(app).post('/api/admin/login', json={'password': ADMIN_PASSWORD})
    assert r.status_code == 200
    return {'Authorization': f"Bearer {r.json()['token']}"}
