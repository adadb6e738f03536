"""
Configuration management for the Quiz Grader system.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepeatAttemptPolicy(str, Enum):
    """What happens to the stored score when a user submits a quiz again."""

    KEEP_FIRST = "keep_first"  # Later attempts are graded, first score stands
    KEEP_BEST = "keep_best"  # Stored score replaced only by a strictly higher one
    REJECT = "reject"  # Repeat submissions are refused


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every variable is prefixed with ``QUIZGRADER_`` (for example
    ``QUIZGRADER_REPEAT_ATTEMPT_POLICY=keep_best``).
    """

    model_config = SettingsConfigDict(
        env_prefix="QUIZGRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Score Recording Configuration
    # ==========================================================================
    repeat_attempt_policy: RepeatAttemptPolicy = Field(
        default=RepeatAttemptPolicy.KEEP_FIRST,
        description="Policy applied when a user submits a quiz they already completed",
    )

    score_store_path: Path = Field(
        default=Path("./data/scores.json"),
        description="JSON file holding recorded scores",
    )

    default_user_id: str = Field(
        default="anonymous",
        min_length=1,
        description="Submitter id used by the CLI when none is given",
    )

    # ==========================================================================
    # Leaderboard Configuration
    # ==========================================================================
    leaderboard_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of leaderboard rows",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level for the quizgrader loggers",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
