"""Sedbot configuration management."""

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class SettingsError(Exception):
    """Settings are missing or invalid."""
    pass


class SedbotSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Telegram
    token: str = Field(description="Telegram bot token")
    handle: Optional[str] = Field(
        default=None,
        description="Bot handle without '@' (defaults to the username reported by Telegram)",
    )
    poll_timeout: int = Field(default=30, ge=0, description="Long polling timeout in seconds")

    # Substitution
    match_timeout: float = Field(
        default=0.5, gt=0, description="Seconds a single substitution may spend matching",
    )

    # Supervisor
    max_failures_per_minute: int = Field(
        default=30, ge=0, description="Failures per elapsed minute tolerated before exiting",
    )
    restart_delay: float = Field(default=1.0, ge=0, description="Seconds to wait before restarting")

    model_config = {"env_prefix": "TELEGRAM_BOT_", "env_file": ".env", "extra": "ignore"}


def load_settings(**overrides) -> SedbotSettings:
    """Load settings from environment.

    Raises:
        SettingsError: A required variable is missing or a value is invalid.
    """
    try:
        return SedbotSettings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"TELEGRAM_BOT_{'_'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise SettingsError(f"invalid configuration: {problems}") from e
