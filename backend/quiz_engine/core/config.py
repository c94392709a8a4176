import json

from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Resolve backend root (…/backend/) regardless of current working directory
BASE_DIR = Path(__file__).resolve().parents[2]
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Quiz Assessment Engine"
    ENV: str = "dev"
    # One origin or several, comma separated.
    # Example: "http://localhost:5173,https://example.com"
    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:5173"]

    # Local SQLite file by default; point at Postgres/MySQL in production.
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'quiz_engine.db'}"
    SQL_ECHO: bool = False

    # DEBUG | INFO | WARNING | ERROR
    LOG_LEVEL: str = "INFO"

    # Upper bound for a submitted option index. Indexes above the real option
    # count are still accepted (graded as wrong); this only rejects garbage.
    MAX_OPTION_INDEX: int = 25

    # Create missing tables on startup (dev convenience); use Alembic elsewhere.
    DB_AUTO_CREATE: bool = True

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None or v == "":
            return []

        if isinstance(v, list):
            return v

        # JSON list first, then comma separated
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    return json.loads(s)
                except ValueError:
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]

        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, v):
        return str(v or "INFO").strip().upper()


settings = Settings()
