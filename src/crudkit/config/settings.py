from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    APP_NAME: str = "crudkit"

    # Document store
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "crudkit"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5_000
    MONGO_SOCKET_TIMEOUT_MS: int = 10_000

    # Test database configuration
    TEST_MONGO_DB: str | None = None
    TESTING: bool = False

    # Pagination
    PAGINATION_DEFAULT_LIMIT: int = 10
    PAGINATION_MAX_LIMIT: int = 100

    # Auth
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Error rendering: include tracebacks for operational errors (development only)
    EXPOSE_ERROR_STACK: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/crudkit")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_DRIVER_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_NAME(self) -> str:
        """
        Return the database name for the current environment.

        When `TESTING=True` and `TEST_MONGO_DB` is provided, the test database is
        used so a test run can never touch the regular database.
        """
        if self.TESTING and self.TEST_MONGO_DB:
            return self.TEST_MONGO_DB
        return self.MONGO_DB

    @property
    def show_error_stack(self) -> bool:
        return self.EXPOSE_ERROR_STACK and self.ENV == "development"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Uppercase LOG_LEVEL before Literal validation ('debug' -> 'DEBUG').
        """
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return v.lower() if isinstance(v, str) else v

    @field_validator("PAGINATION_DEFAULT_LIMIT", "PAGINATION_MAX_LIMIT")
    @classmethod
    def positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("pagination limits must be positive")
        return v

    @model_validator(mode="after")
    def default_limit_within_ceiling(self) -> "Settings":
        if self.PAGINATION_DEFAULT_LIMIT > self.PAGINATION_MAX_LIMIT:
            raise ValueError("PAGINATION_DEFAULT_LIMIT must not exceed PAGINATION_MAX_LIMIT")
        return self

    model_config = SettingsConfigDict(
        # .env at the project root (three levels up from this file: config -> crudkit -> src)
        env_file=str(Path(__file__).resolve().parents[3] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() avoids re-reading the environment on every dependency call.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
