"""Sheet engine settings, read from BH2E_* environment variables or .env."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the sheet service.

    Environment variables take precedence over the .env file.
    Every variable carries the BH2E_ prefix (e.g. BH2E_DICE_SEED=7).
    """

    model_config = SettingsConfigDict(
        env_prefix="BH2E_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./bh2e.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Dice: fixed seed for reproducible sessions, None for system entropy
    DICE_SEED: Optional[int] = None

    # Chat feed
    CHAT_HISTORY_LIMIT: int = Field(50, ge=1, le=500)


settings = Settings()
