"""
Configuration settings for the JobTracker client
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    """Client settings loaded from environment variables"""

    # Session persistence
    session_file: Path = Field(default_factory=lambda: Path.home() / ".jobtracker" / "session.json")

    # API connection
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0  # seconds, applies to every request

    # Dashboard / statistics display
    chart_weeks: int = 8
    recent_limit: int = 5

    # Logging
    log_level: str = "WARNING"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "JOBTRACKER_"
        extra = "ignore"


# Global settings instance
settings = Settings()
