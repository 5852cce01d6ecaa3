"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from password_hash_batch.domain.hash_operation import (
    DEFAULT_SALT_ROUNDS,
    MAX_SALT_ROUNDS,
    MIN_SALT_ROUNDS,
)

PositiveInt = Annotated[int, Field(gt=0)]
SaltRoundsInt = Annotated[int, Field(ge=MIN_SALT_ROUNDS, le=MAX_SALT_ROUNDS)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    default_salt_rounds: SaltRoundsInt = Field(
        default=DEFAULT_SALT_ROUNDS,
        validation_alias="DEFAULT_SALT_ROUNDS",
    )
    batch_max_concurrency: PositiveInt = Field(
        default=1,
        validation_alias="BATCH_MAX_CONCURRENCY",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
