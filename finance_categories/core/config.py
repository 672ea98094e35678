"""
Finance Categories Application Configuration

Uses Pydantic Settings for automatic validation
and loading environment variables from .env file.

Principles:
1. All settings in one place
2. Automatic type validation
3. Environment variables override defaults
"""

from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with automatic loading from environment variables

    Pydantic Settings automatically:
    - Reads .env file
    - Converts data types
    - Validates values
    - Overrides with environment variables
    """

    # === MAIN SETTINGS ===
    project_name: str = Field(default="Finance Categories", description="Project name")
    debug: bool = Field(default=False, description="Debug mode")
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 prefix")

    # === DATABASE ===
    database_url: str = Field(
        default="sqlite:///./finance_categories.db",
        description="Database connection URL (PostgreSQL or SQLite)"
    )

    # === REDIS CONFIGURATION ===
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the category list cache"
    )
    redis_max_connections: int = Field(
        default=20,
        description="Maximum Redis connections in pool"
    )
    cache_enabled: bool = Field(
        default=False,
        description="Cache category lists in Redis"
    )
    category_cache_ttl: int = Field(
        default=300,  # 5 minutes
        description="Category list cache time in seconds"
    )

    # === CATEGORIES ===
    strict_icon_validation: bool = Field(
        default=False,
        description="Reject icon keys outside the known icon vocabulary"
    )

    # === CORS ===
    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed origins for CORS"
    )

    # === LOGGING ===
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Validate that database URL is correct"""
        if not (v.startswith("postgresql") or v.startswith("sqlite")):
            raise ValueError("Database URL must start with postgresql:// or sqlite://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate logging level"""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of: {allowed_levels}")
        return v.upper()

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL format"""
        if not (v.startswith("redis://") or v.startswith("rediss://")):
            raise ValueError("Redis URL must start with redis:// or rediss://")
        return v

    model_config = SettingsConfigDict(
        # Read environment variables from .env file
        env_file=".env",
        env_file_encoding="utf-8",
        # Environment variables override default values
        case_sensitive=False,
        extra="ignore",
    )


# Create a global instance of settings
# It will be automatically loaded when the module is imported
settings = Settings()


def get_database_url() -> str:
    """Get the database URL"""
    return settings.database_url


def get_cors_origins() -> List[str]:
    """Get allowed origins for CORS"""
    return settings.allowed_origins
