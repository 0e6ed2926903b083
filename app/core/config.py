"""
Application configuration using Pydantic Settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "Geocodes API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # REST surface
    API_PREFIX: str = "/rest/geocodes"
    SUPPORTED_API_VERSION: int = 1
    REFERENCE_DATE_FORMAT: str = "%Y-%m-%d"

    # Minimum search term length that triggers a directory search
    CITY_SEARCH_MIN_LENGTH: int = 3
    COUNTRY_SEARCH_MIN_LENGTH: int = 4

    # Directory backend: "remote" (geocodes web service) or "mongo"
    GEOCODE_BACKEND: str = "remote"
    DIRECTORY_MAX_RESULTS: int = 100

    # Remote geocodes service
    GEOCODES_SERVICE_URL: str = "http://localhost:8080/geocodes/api/v1"
    GEOCODES_SERVICE_TIMEOUT: float = 10.0

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "geocodes"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"



@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
