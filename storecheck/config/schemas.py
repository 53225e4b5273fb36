"""
Configuration schemas using Pydantic for validation.

The harness configuration has five sections: logging, database, runner,
credentials and store. Every field has a default so an empty YAML file is a
valid configuration.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "FALSE")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="info", description="Global log level")
    micros: bool = Field(default=False, description="Show microsecond timestamps")
    colors: bool = Field(default=True, description="Colored console output")

    @field_validator("level", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> object:
        """Validate log level is a recognized level."""
        if v is False:
            return "false"
        if isinstance(v, str) and v.upper() not in _LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(_LEVELS)}"
            )
        return v


class DatabaseConfig(BaseModel):
    """Configuration for the ephemeral database fixture."""

    backend: Literal["sqlite", "postgresql"] = "sqlite"
    server_url: str | None = Field(
        default=None,
        description="PostgreSQL server URL the throwaway database is created on",
    )
    query_log_level: str | None = Field(
        default="trace", description="Level for per-query logging, None to disable"
    )
    echo: bool = False

    @model_validator(mode="after")
    def validate_server_url(self) -> "DatabaseConfig":
        if self.backend == "postgresql":
            if not self.server_url:
                raise ValueError("database.server_url is required for postgresql")
            if not self.server_url.startswith(("postgresql", "postgres://")):
                raise ValueError(
                    "database.server_url must start with 'postgresql' or 'postgres://'"
                )
        return self


class ReportConfig(BaseModel):
    """Where scenario and server-side reports are written."""

    html: str = "playwright-report/index.html"
    junit: str = "playwright-report/results.xml"
    server_junit: str = "reports/junit/py-test-results.xml"
    artifacts: str = "test-results"


class RunnerConfig(BaseModel):
    """Browser-driven scenario runner configuration."""

    base_url: str = "http://localhost:8080"
    headless: bool = True
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    timeout: int = Field(default=90, ge=1, description="Per-test ceiling in seconds")
    retries: int = Field(default=1, ge=0)
    video: Literal["on", "off", "retain-on-failure"] = "retain-on-failure"
    screenshot: Literal["on", "off", "only-on-failure"] = "only-on-failure"
    workers: int = Field(default=1, ge=1)
    navigation_timeout: int = Field(default=30_000, ge=1, description="ms")
    selector_timeout: int = Field(default=10_000, ge=1, description="ms")
    item_timeout: int = Field(default=30_000, ge=1, description="ms")
    login_timeout: int = Field(default=15_000, ge=1, description="ms")
    settle_time: int = Field(default=3_000, ge=0, description="ms")
    probe_timeout: float = Field(default=5.0, gt=0, description="seconds")
    tests: str = "tests/e2e"
    server_tests: str = "tests/integration"
    reports: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CredentialsConfig(BaseModel):
    """Credentials used by login scenarios and the seed command."""

    email: str = "admin@rmit.edu.vn"
    password: str = "mypassword"
    first_name: str = "Admin"
    last_name: str = "User"


class StoreConfig(BaseModel):
    """Reference storefront settings."""

    secret: str = "storecheck-secret"
    token_life: int = Field(default=3600, ge=1, description="seconds")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class HarnessConfig(BaseModel):
    """Root harness configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    model_config = ConfigDict(extra="forbid")
