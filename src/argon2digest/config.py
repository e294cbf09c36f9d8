"""Environment-driven cost parameters using pydantic-settings."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_U32_MAX = 2**32 - 1

DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 32 * 1024
DEFAULT_PARALLELISM = 4
DEFAULT_KEY_LENGTH = 32
DEFAULT_SALT_LENGTH = 16


class DigestSettings(BaseSettings):
    """Argon2id cost parameters. All values can be overridden via env vars prefixed
    ``ARGON2DIGEST_``.

    Build one per use and hand it to :class:`argon2digest.Argon2Digest`; nothing
    here is shared process-wide.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARGON2DIGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- cost ---
    time_cost: int = Field(default=DEFAULT_TIME_COST, ge=1, le=_U32_MAX)
    memory_cost: int = Field(default=DEFAULT_MEMORY_COST, ge=8, le=_U32_MAX)  # KiB
    parallelism: int = Field(default=DEFAULT_PARALLELISM, ge=1, le=255)

    # --- output ---
    key_length: int = Field(default=DEFAULT_KEY_LENGTH, ge=4, le=_U32_MAX)
    salt_length: int = Field(default=DEFAULT_SALT_LENGTH, ge=8, le=_U32_MAX)

    @model_validator(mode="after")
    def _check_memory_per_lane(self) -> DigestSettings:
        # Argon2 needs at least 8 KiB per lane.
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError(
                f"memory_cost must be at least 8 * parallelism ({8 * self.parallelism} KiB)"
            )
        return self
