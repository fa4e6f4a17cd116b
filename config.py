# backend/config.py
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/fitlog"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 🔐 JWT config: the session is a long-lived http-only cookie
    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_COOKIE_NAME = "fitlog_session"
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_SESSION_COOKIE = False
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=30)

    # AI plan generation
    OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY")
    OPENROUTER_MODEL = os.environ.get("OPENROUTER_MODEL", "openai/gpt-4o-mini")
    OPENROUTER_URL = os.environ.get(
        "OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions"
    )
    OPENROUTER_TIMEOUT = int(os.environ.get("OPENROUTER_TIMEOUT", "60"))

    # account setup jobs
    SETUP_JOBS_INLINE = _env_bool("SETUP_JOBS_INLINE", False)
    SETUP_JOB_WORKERS = int(os.environ.get("SETUP_JOB_WORKERS", "2"))
    JOB_RETENTION_SECONDS = int(os.environ.get("JOB_RETENTION_SECONDS", "600"))

    # login / signup throttling
    LOGIN_MAX_ATTEMPTS = int(os.environ.get("LOGIN_MAX_ATTEMPTS", "5"))
    LOGIN_WINDOW_SECONDS = int(os.environ.get("LOGIN_WINDOW_SECONDS", "900"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SETUP_JOBS_INLINE = True
    OPENROUTER_API_KEY = "test-key"
