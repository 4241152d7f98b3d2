"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent

DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_JWT_SECRET = "portfolio-jwt-secret-dev"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Settings:
    ENV: str
    ADMIN_PASSWORD: str
    ADMIN_PASSWORD_HASH: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    JWT_EXPIRE_HOURS: int
    DATABASE_URL: str
    SEED_ON_STARTUP: bool
    ALLOW_INSECURE_DEFAULTS: bool
    ALLOW_DEV_CORS: bool
    CONTACT_RATE_LIMIT_PER_MIN: int
    LOGIN_RATE_LIMIT_PER_MIN: int
    RATE_LIMIT_WINDOW_SECONDS: int
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD)
        self.ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "").strip()
        self.JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'portfolio.db'}")
        self.SEED_ON_STARTUP = _env_bool("SEED_ON_STARTUP", "true")
        self.ALLOW_INSECURE_DEFAULTS = _env_bool("ALLOW_INSECURE_DEFAULTS", "false")
        self.ALLOW_DEV_CORS = _env_bool("ALLOW_DEV_CORS", "true")
        self.CONTACT_RATE_LIMIT_PER_MIN = int(os.getenv("CONTACT_RATE_LIMIT_PER_MIN", "10"))
        self.LOGIN_RATE_LIMIT_PER_MIN = int(os.getenv("LOGIN_RATE_LIMIT_PER_MIN", "20"))
        self.RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.ENV == "dev" or self.ALLOW_INSECURE_DEFAULTS:
            return
        if self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set to a non-default value in non-dev environments")
        if not self.ADMIN_PASSWORD_HASH and self.ADMIN_PASSWORD == DEFAULT_ADMIN_PASSWORD:
            raise RuntimeError("ADMIN_PASSWORD must be set to a non-default value in non-dev environments")


settings = Settings()
