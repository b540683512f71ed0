"""
Configuration settings for the MAHSA microlearning backend.

Uses Pydantic settings management for environment variables and configuration.
"""

from typing import Annotated, List

from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator
import json
import secrets


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "MAHSA Microlearning"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Microlearning and compliance tracking for hospital staff"

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12  # one shift

    # Database
    DATABASE_URL: str = "sqlite:///./microlearning.db"

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, str):
            return json.loads(v)
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    # Gamification settings
    XP_PER_CORRECT_ANSWER: int = 50
    XP_PER_LEVEL: int = 500
    LEADERBOARD_SIZE: int = 10
    NEW_COURSE_WINDOW_DAYS: int = 7
    XP_MILESTONE: int = 1000

    # Badge catalog ids
    FIRST_COURSE_BADGE_ID: str = "b1"
    XP_MILESTONE_BADGE_ID: str = "b2"
    STREAK_BADGE_ID: str = "b3"
    PERFECT_SCORE_BADGE_ID: str = "b4"

    # Startup
    SEED_ON_STARTUP: bool = True

    # Development settings
    DEBUG: bool = False
    TESTING: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def uses_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")


# Create global settings instance
settings = Settings()
