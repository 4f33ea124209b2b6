"""Service configuration.

Loads from environment variables with the PGDIAGNOSE_ prefix, e.g.
``PGDIAGNOSE_DATABASE_URL=postgresql://reports@localhost/pgdiagnose``.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PGDIAGNOSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = Field(
        default="postgresql:///pgdiagnose",
        description="DSN of the database that stores finished reports",
    )
    environment: str = Field(
        default="development",
        description="'production' enables the X-Forwarded-Proto https check",
    )

    job_deadline_seconds: float = Field(
        default=25.0,
        gt=0,
        description="How long a submit call waits for its job before answering",
    )
    connect_timeout_seconds: float = Field(default=10.0, gt=0)
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-statement timeout for probe queries; unset means no limit",
    )

    pool_min_size: int = Field(default=1, ge=1, le=100)
    pool_max_size: int = Field(default=10, ge=1, le=100)

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
