"""
Application Configuration
All values come from environment variables or the .env file.

Database:
- DATABASE_URL wins when set
- otherwise POSTGRES_HOST + credentials build a PostgreSQL URL
- with no Postgres host configured, storage falls back to SQLite (dev.db)
"""
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    # ===========================================
    # App
    # ===========================================
    APP_NAME: str = "Campus Ratings"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Security
    # ===========================================
    SECRET_KEY: str = "your-super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    RESET_TOKEN_EXPIRE_HOURS: int = 24

    # ===========================================
    # Database - PostgreSQL with SQLite fallback
    # ===========================================
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "campus_ratings"
    DATABASE_URL: Optional[str] = None
    SQLITE_PATH: str = "dev.db"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.POSTGRES_HOST:
            return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return f"sqlite:///{get_base_dir() / self.SQLITE_PATH}"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # ===========================================
    # CORS
    # ===========================================
    FRONTEND_URL: str = "http://localhost:5000"
    CORS_ORIGINS: Optional[List[str]] = None

    @property
    def cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS:
            return self.CORS_ORIGINS
        origins = [
            self.FRONTEND_URL,
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:5173",
        ]
        return list(dict.fromkeys(origins))

    # ===========================================
    # Email (Mailgun preferred, SMTP fallback)
    # ===========================================
    MAILGUN_API_KEY: Optional[str] = None
    MAILGUN_DOMAIN: Optional[str] = None
    MAILGUN_API_BASE: str = "https://api.mailgun.net/v3"
    EMAIL_USER: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    EMAIL_TIMEOUT_SECONDS: int = 10

    @property
    def use_mailgun(self) -> bool:
        return bool(self.MAILGUN_API_KEY and self.MAILGUN_DOMAIN)

    @property
    def smtp_password(self) -> Optional[str]:
        """App passwords are often pasted with spaces"""
        if self.EMAIL_PASSWORD is None:
            return None
        return "".join(self.EMAIL_PASSWORD.split())

    @property
    def email_from(self) -> str:
        if self.EMAIL_FROM:
            return self.EMAIL_FROM
        return f"{self.APP_NAME} <{self.EMAIL_USER or 'no-reply@localhost'}>"

    # ===========================================
    # Ratings
    # ===========================================
    # Side-by-side comparison holds at most three doctors
    COMPARE_LIMIT: int = Field(3, ge=1, le=3)

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_base_dir() -> Path:
    """Get base directory of the backend project"""
    return Path(__file__).resolve().parent.parent.parent


settings = get_settings()
