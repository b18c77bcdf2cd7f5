import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from notes_tasks_database.db import get_database_url

DEFAULT_SECRET_KEY = "dev_secret_change_me"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# PUBLIC_INTERFACE
class Settings(BaseModel):
    """Process-wide configuration, built once at startup and passed down explicitly."""

    secret_key: str = DEFAULT_SECRET_KEY
    token_expire_days: int = Field(default=7, gt=0)
    database_url: str = "sqlite:///./auth-notes-tasks.sqlite"
    cookie_secure: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @property
    def token_max_age(self) -> int:
        """Cookie max-age in seconds; matches the token lifetime."""
        return self.token_expire_days * 24 * 60 * 60

    @classmethod
    def from_env(cls) -> "Settings":
        """Reads settings from the environment, loading a .env file first if present."""
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            secret_key=os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET") or DEFAULT_SECRET_KEY,
            token_expire_days=int(os.getenv("TOKEN_EXPIRE_DAYS", "7")),
            database_url=get_database_url(),
            cookie_secure=_env_bool("COOKIE_SECURE"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO"):
    """Installs a single stream handler on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
