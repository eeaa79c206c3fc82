"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="NEURAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Persistence
    store_path: str = Field(default="neural_apps.json", description="JSON file holding saved apps")

    # Engine
    tick_interval: float = Field(default=1.0, gt=0.0, description="Timer heartbeat period (seconds)")
    default_item_label: str = Field(default="New Item", description="Label for list items added without a value")
    max_blueprint_depth: int = Field(default=200, gt=0, description="Max nesting accepted from generated responses")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
