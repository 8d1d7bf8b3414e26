"""
Centralized configuration for Lead Concierge.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # Brand
    brand_name: str = Field(default="Lead Concierge", env="BRAND_NAME")

    # Persistence
    database_url: str = Field(default="sqlite:///./data/leads.db", env="DATABASE_URL")
    lead_history_limit: int = Field(default=25, env="LEAD_HISTORY_LIMIT")
    export_directory: str = Field(default="./data/exports", env="EXPORT_DIRECTORY")

    # Lead scoring
    lead_score_threshold_priority: int = Field(default=80, env="LEAD_SCORE_THRESHOLD_PRIORITY")
    lead_score_threshold_high: int = Field(default=60, env="LEAD_SCORE_THRESHOLD_HIGH")
    lead_score_threshold_medium: int = Field(default=40, env="LEAD_SCORE_THRESHOLD_MEDIUM")

    # API
    api_host: str = Field(default="0.0.0.0", env="API_HOST")
    api_port: int = Field(default=8000, env="API_PORT")
    api_title: str = Field(default="Lead Concierge API", env="API_TITLE")
    api_version: str = Field(default="1.0.0", env="API_VERSION")
    cors_origins: str = Field(default="*", env="CORS_ORIGINS")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    debug: bool = Field(default=False, env="DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
