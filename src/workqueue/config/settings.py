"""
Module: settings.py
Description: Work-queue configuration using pydantic-settings.

Loads queue, polling and logging settings from WORKQUEUE_* environment
variables with validation and defaults. Supports .env files for local
development.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Receive count before SQS moves a message to the dead-letter queue.
MAX_RECEIVE_COUNT_BEFORE_DEAD = 5

# 14 days, the SQS maximum.
DEFAULT_MESSAGE_RETENTION_PERIOD = 1209600


class Settings(BaseSettings):
    """Work-queue settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORKQUEUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="eu-central-1", description="AWS region")
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Override SQS endpoint (LocalStack, ElasticMQ)"
    )

    # Provisioning settings
    dead_letter_suffix: str = Field(
        default="-deadMessages",
        min_length=1,
        description="Suffix appended to a queue name to name its dead-letter queue"
    )
    max_receive_count: int = Field(
        default=MAX_RECEIVE_COUNT_BEFORE_DEAD,
        ge=1,
        le=1000,
        description="Deliveries before a message is moved to the dead-letter queue"
    )
    message_retention_period: int = Field(
        default=DEFAULT_MESSAGE_RETENTION_PERIOD,
        ge=60,
        le=1209600,
        description="Message retention period in seconds for both queues"
    )

    # Polling settings
    visibility_timeout: int = Field(
        default=600,
        ge=0,
        le=43200,
        description="Seconds a received message stays hidden from other receivers"
    )
    wait_time_seconds: int = Field(
        default=20,
        ge=0,
        le=20,
        description="Long-poll wait time for a single receive call"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
