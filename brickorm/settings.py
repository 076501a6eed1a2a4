"""Library settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

#: Dialect tags shipped with brickORM.
DialectTag = Literal["postgres", "mysql", "mssql", "sqlite"]


class BrickORMSettings(BaseSettings):
    """Configuration for statement compilation.

    Values are read from ``BRICKORM_*`` environment variables and from a
    ``.env`` file in the working directory, e.g.
    ``BRICKORM_DEFAULT_DIALECT=sqlite``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BRICKORM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_dialect: DialectTag = Field(
        default="postgres",
        description="Dialect used when a compile call does not name one",
    )
    enforce_param_limit: bool = Field(
        default=True,
        description="Raise ParamLimitExceededError instead of logging a warning",
    )
    log_sql: bool = Field(
        default=False,
        description="Log every compiled statement at debug level",
    )
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> BrickORMSettings:
    """Return the cached settings instance."""
    return BrickORMSettings()
