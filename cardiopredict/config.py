"""
Configuration Management for CardioPredict

Environment-based configuration using Pydantic Settings.
"""
from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields from .env file
    )

    # Application
    app_name: str = "CardioPredict"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Package log level")

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # Paths
    reports_dir: str = "reports"

    # Database
    database_url: str = "sqlite:///./cardiopredict.db"
    persist_predictions: bool = Field(default=True, description="Store every prediction in the history table")
    history_limit: int = Field(default=50, description="Most recent records returned by the history endpoint")

    # Randomness
    random_seed: Optional[int] = Field(default=None, description="Seed for reproducible model noise and ECG synthesis")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
