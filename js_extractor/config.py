from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from js_extractor.infrastructure.http.resource_fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "JS Extractor API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Job store: "memory" keeps jobs for the lifetime of the process,
    # "database" persists them through SQLAlchemy at database_url.
    job_store: str = "memory"
    database_url: str = "sqlite:///data/js_extractor.db"

    # Downloads
    download_dir: str = "downloads"
    request_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    # Jobs
    recent_jobs_limit: int = 10
    shutdown_grace_seconds: float = 30.0

    # Per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore: outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # ExtractionService pipeline

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def uses_database(self) -> bool:
        return self.job_store.strip().lower() == "database"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
