"""Configuration management for the shortlink service."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Remote store settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for the remote key-value tier (tier disabled if unset)"
    )

    redis_key_prefix: str = Field(
        default="shortlink:",
        description="Namespace prefix applied to every key in the remote store"
    )

    remote_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Upper bound for any single remote store call"
    )

    remote_ttl_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Expiry applied to remote writes (no expiry if unset)"
    )

    seed_file: Optional[str] = Field(
        default=None,
        description="JSON file with extra static seed entries ({key: url})"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. Each worker owns its own memory tier."
    )

    base_url: str = Field(
        default="http://localhost:9200",
        description="Origin used for unlock redirects when the request carries none"
    )

    # Key generation settings
    key_part_length: int = Field(
        default=3,
        ge=1,
        description="Length of each of the two random halves of a bare key"
    )

    key_batch_size: int = Field(
        default=1,
        ge=1,
        description="Candidates drawn and checked concurrently per generation round"
    )

    max_collision_retries: int = Field(
        default=10,
        ge=1,
        description="Maximum candidate draws before key generation gives up"
    )

    # Notification settings (optional)
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram bot token for access notifications"
    )

    telegram_chat_id: Optional[str] = Field(
        default=None,
        description="Telegram chat that receives access notifications"
    )

    notify_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="HTTP timeout for notification delivery"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @property
    def notifications_enabled(self) -> bool:
        """Whether both Telegram credentials are present."""
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
