"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".portfolio_tracker"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Portfolio Tracker"

    # Data directory (balance log and log files live here)
    data_dir: Optional[Path] = None

    # Plaintext positions JSON (already decrypted by an external filter)
    positions_file: Optional[Path] = None

    # Balance log URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Market data settings
    quote_provider: str = "yahoo"
    history_buffer_days: int = 3
    previous_close_window_days: int = 7

    # Background refresh
    refresh_interval_seconds: float = 60
    series_refresh_interval_seconds: float = 3600
    historic_fetch_timeout_seconds: float = 5.0
    series_max_points: int = Field(default=78, ge=1)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get balance log URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "balances.db"
        return f"sqlite:///{db_path}"

    def get_log_dir(self) -> Path:
        """Get the log directory."""
        log_dir = self.get_data_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (used by the CLI overrides)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
