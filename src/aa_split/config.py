"""Configuration management for AA Split."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AA_SPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Roster used on start and after a reset; ids are assigned "1", "2", ...
    default_participants: list[str] = ["Me", "Friend A", "Friend B", "Friend C"]

    # Name given to items the receipt text left unnamed
    default_item_name: str = "New item"

    # Display only; amounts are never converted
    currency_symbol: str = "¥"


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the AA_SPLIT_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
