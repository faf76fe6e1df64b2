"""Application configuration read from the environment."""

import os
from datetime import timedelta

from dotenv import load_dotenv

DEFAULT_SECRET = "dev-secret-change-me"


def _split(value):
    return [part.strip() for part in value.split(",") if part.strip()]


class Config:
    """Settings for create_app(). Values come from env vars / .env."""

    def __init__(self):
        load_dotenv()

        self.SECRET_KEY = os.getenv("SESSION_SECRET", DEFAULT_SECRET)
        self.SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory")
        self.SESSION_LIFETIME_HOURS = float(os.getenv("SESSION_LIFETIME_HOURS", "8"))
        self.PERMANENT_SESSION_LIFETIME = timedelta(hours=self.SESSION_LIFETIME_HOURS)
        self.SESSION_COOKIE_HTTPONLY = True
        self.SESSION_COOKIE_SAMESITE = "Lax"
        self.SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

        self.JIRA_TIMEOUT = float(os.getenv("JIRA_TIMEOUT", "30"))
        self.CORS_ORIGINS = _split(os.getenv(
            "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
        ))
        self.STATIC_DIR = os.getenv("STATIC_DIR") or None

        self.HOST = os.getenv("HOST", "127.0.0.1")
        self.PORT = int(os.getenv("PORT", "3000"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    def to_dict(self):
        return {k: v for k, v in vars(self).items() if k.isupper()}
