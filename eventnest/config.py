# -*- coding: utf-8 -*-
"""
Application settings, read from the environment and an optional .env file.
"""

from dataclasses import dataclass
from typing import Optional

from starlette.config import Config


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    database_url: str = "sqlite:///./database/eventnest.db"
    jwt_secret: str = "change-me-eventnest-development-secret"
    access_token_expire_days: int = 7
    frontend_url: str = "http://localhost:3000"
    certificates_dir: str = "./certificates"

    email_host: Optional[str] = None
    email_port: int = 587
    email_user: Optional[str] = None
    email_password: Optional[str] = None
    email_from: str = "EventNest <no-reply@eventnest.local>"
    email_use_tls: bool = True
    email_timeout: float = 15.0

    log_level: Optional[str] = None
    log_file: Optional[str] = None

    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_name: str = "EventNest Admin"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def effective_log_level(self) -> str:
        if self.log_level:
            return self.log_level.upper()
        return "DEBUG" if self.environment == "development" else "INFO"


def load_settings(env_file: str = ".env") -> Settings:
    config = Config(env_file)

    database_url = config("DATABASE_URL", default=Settings.database_url)
    # Render/Heroku style URLs
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    return Settings(
        environment=config("ENVIRONMENT", default=Settings.environment),
        database_url=database_url,
        jwt_secret=config("JWT_SECRET", default=Settings.jwt_secret),
        access_token_expire_days=config("ACCESS_TOKEN_EXPIRE_DAYS", cast=int, default=Settings.access_token_expire_days),
        frontend_url=config("FRONTEND_URL", default=Settings.frontend_url),
        certificates_dir=config("CERTIFICATES_DIR", default=Settings.certificates_dir),
        email_host=config("EMAIL_HOST", default=None),
        email_port=config("EMAIL_PORT", cast=int, default=Settings.email_port),
        email_user=config("EMAIL_USER", default=None),
        email_password=config("EMAIL_PASSWORD", default=None),
        email_from=config("EMAIL_FROM", default=Settings.email_from),
        email_use_tls=config("EMAIL_USE_TLS", cast=bool, default=Settings.email_use_tls),
        email_timeout=config("EMAIL_TIMEOUT", cast=float, default=Settings.email_timeout),
        log_level=config("LOG_LEVEL", default=None),
        log_file=config("LOG_FILE", default=None),
        admin_email=config("ADMIN_EMAIL", default=None),
        admin_password=config("ADMIN_PASSWORD", default=None),
        admin_name=config("ADMIN_NAME", default=Settings.admin_name),
    )
