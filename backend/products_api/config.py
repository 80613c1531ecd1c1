"""
Products API — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       coerces and validates them, and exposes a singleton `settings` object.
When:  Loaded once at module import time; there is no hot-reload.

Database connection:
    The service talks to PostgreSQL through the asyncpg driver. The
    connection is described by the same PG_HOST / PG_PORT / PG_USER /
    PG_PASSWORD / PG_DATABASE variables the deployment already exports.
    DATABASE_URL, when set, replaces all of them (the test suite points it
    at an aiosqlite file).
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults; production deployments override
    the PG_* values.
    """

    # ── Database ──────────────────────────────────────────────────────────
    pg_host: str = Field(default="localhost")
    pg_port: int = Field(default=5432, ge=1, le=65535)
    pg_user: str = Field(default="postgres")
    pg_password: str = Field(default="postgres")
    pg_database: str = Field(default="postgres")

    # Full SQLAlchemy URL; takes precedence over the PG_* pieces when set
    database_url: Optional[str] = Field(default=None)

    # Pool sizing is left at the driver-friendly defaults; it only applies
    # to server databases (see database.py)
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Issue CREATE TABLE IF NOT EXISTS for `products` during startup
    db_create_tables: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def sqlalchemy_url(self) -> str:
        """
        What: The URL handed to create_async_engine().
        How:  DATABASE_URL verbatim if given, otherwise a postgresql+asyncpg
              URL assembled from the PG_* settings. URL.create() escapes the
              password, so special characters need no manual quoting.
        """
        if self.database_url:
            return self.database_url
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.pg_user,
            password=self.pg_password,
            host=self.pg_host,
            port=self.pg_port,
            database=self.pg_database,
        ).render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.startswith("sqlite")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PG_HOST and pg_host both work
        "extra": "ignore",
    }


settings = Settings()
