"""Application settings for the bakery back office.

Loaded from ``BAKERY_*`` environment variables and an optional ``.env`` file.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


class BakerySettings(BaseSettings):
    """Runtime configuration, validated by pydantic."""

    env: Literal["development", "test", "staging", "production"] = "development"
    log_level: Optional[str] = None
    log_dir: str = "logs"
    log_to_file: bool = False

    currency: str = "VND"
    store_name: str = "Bakery"

    model_config = SettingsConfigDict(
        env_prefix="BAKERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def effective_log_level(self) -> str:
        """The configured level, or the default for the current environment."""
        return (self.log_level or _LEVEL_BY_ENV.get(self.env, "INFO")).upper()

    @property
    def renders_json(self) -> bool:
        return self.env in ("production", "staging")


_settings: Optional[BakerySettings] = None


def get_settings() -> BakerySettings:
    """Return the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = BakerySettings()
    return _settings


def set_settings_for_test(**overrides) -> BakerySettings:
    """For testing only: replace the settings instance with explicit values."""
    global _settings
    _settings = BakerySettings(**overrides)
    return _settings
