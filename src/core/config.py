"""Pydantic-settings configuration for the Portfolio Tracker.

Loads settings from the environment and an optional .env file with sensible
defaults for local development. The SQLite location comes from DATABASE_PATH.
"""

from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = "Portfolio Tracker"
    debug: bool = False
    log_level: str = "INFO"

    # SQLite database file
    database_path: str = "./data/portfolio.db"

    # Startup behaviour
    seed_demo_data: bool = True

    # Positions file used by the file import endpoints
    positions_file_path: str = "./data/positions.json"

    # FX rates file ({"USDJPY": {"2024-01-05": 144.2}}) used to fill the fx_rates table
    fx_rates_file_path: str = "./data/fxRates.json"

    # CORS
    allowed_origins: str = ""  # Comma-separated extra CORS origins

    @computed_field
    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the local SQLite file."""
        return f"sqlite:///{Path(self.database_path).expanduser()}"


# Singleton instance
settings = Settings()
