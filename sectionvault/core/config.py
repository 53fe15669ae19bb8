"""SectionVault settings, read from the environment or a ``.env`` file."""

from enum import Enum
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List

_DEFAULT_JWT_SECRET = "dev-insecure-key-change-me"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "text")
_LOCAL_HOSTS = ("localhost", "127.0.0.1")


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class ConfigurationError(Exception):
    """Settings are not acceptable for the environment they run in."""


class Settings(BaseSettings):
    """
    Runtime configuration.

    Every field maps to the upper-cased environment variable of the same
    name (``SECTION_WRITE_MAX_ATTEMPTS`` sets ``section_write_max_attempts``).
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="development relaxes the startup security checks"
    )

    # Storage
    database_url: str = Field(
        default="sqlite:///./sectionvault.db",
        description="SQLAlchemy URL of the section store"
    )
    sqlite_busy_timeout: float = Field(
        default=30.0,
        description="Seconds a SQLite writer waits for a locked database file"
    )
    db_pool_size: int = Field(default=5, description="PostgreSQL persistent connections")
    db_max_overflow: int = Field(default=10, description="PostgreSQL burst connections")
    db_pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    db_pool_recycle: int = Field(default=1800, description="Seconds before a connection is replaced")

    # Section writes
    section_write_max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts of one save/restore before it fails with a conflict"
    )
    activity_feed_limit: int = Field(
        default=20,
        ge=1,
        description="Entries returned by the activity feeds when no limit is given"
    )

    # Access
    auth_enabled: bool = Field(
        default=False,
        description="Require bearer tokens; off means every caller is an anonymous admin"
    )
    jwt_secret_key: str = Field(default=_DEFAULT_JWT_SECRET, description="HS256 signing key")
    jwt_algorithm: str = Field(default="HS256", description="Token signature algorithm")
    cors_allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated browser origins allowed to call the API"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="json or text")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in _LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {', '.join(_LOG_FORMATS)}")
        return fmt

    def get_cors_origins(self) -> List[str]:
        """Parsed CORS origins. A wildcard is refused because credentials are allowed."""
        origins = [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]
        if "*" in origins:
            raise ValueError("CORS_ALLOWED_ORIGINS may not contain '*'; list the origins explicitly")
        return origins

    @property
    def uses_default_jwt_secret(self) -> bool:
        return self.jwt_secret_key == _DEFAULT_JWT_SECRET

    def collect_insecure_settings(self) -> List[str]:
        """Problems that make these settings unfit for production, as messages."""
        problems: List[str] = []
        if self.uses_default_jwt_secret:
            problems.append("JWT_SECRET_KEY still has its development default (try: openssl rand -hex 32)")
        if not self.auth_enabled:
            problems.append("AUTH_ENABLED is false, so anyone can edit any section")
        local = [o for o in self.get_cors_origins() if any(h in o for h in _LOCAL_HOSTS)]
        if local:
            problems.append(f"CORS_ALLOWED_ORIGINS includes local origins: {local}")
        return problems

    def validate_production_config(self) -> None:
        """Raise ConfigurationError when production runs with insecure settings.

        Outside production this is a no-op; the lifespan logs the problems instead.
        """
        if self.environment != Environment.PRODUCTION:
            return
        problems = self.collect_insecure_settings()
        if problems:
            raise ConfigurationError(
                "Refusing to start with insecure production settings:\n  - " + "\n  - ".join(problems)
            )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
