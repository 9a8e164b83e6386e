"""
Environment configuration for the boarding-house billing engine.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Boarding House Billing", alias="PROJECT_NAME")
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database configuration
    DATABASE_URL: str = "sqlite:///./boarding_house.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_POOL_OVERFLOW: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # Money presentation
    CURRENCY: str = "VND"
    AMOUNT_TEXT_LOCALE: str = "vi"

    # Meter handling
    DEFAULT_MAX_ELECTRIC_METER: int = Field(default=999999, gt=0)
    DEFAULT_MAX_WATER_METER: int = Field(default=99999, gt=0)
    METER_ROLLOVER_INCLUSIVE: bool = False

    # Debt tracking
    DEBT_WARNING_MIN_MONTHS: int = Field(default=2, ge=1)
    DEBT_WORKERS: int = Field(default=4, ge=1)

    # Bill mutations
    STALE_WRITE_RETRIES: int = Field(default=1, ge=0)
    HISTORY_PAGE_LIMIT: int = Field(default=100, ge=1)

    # Validators
    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Optional[str]) -> str:
        """Accept log levels in any case"""
        return (v or "INFO").upper()

    @field_validator('AMOUNT_TEXT_LOCALE', mode='before')
    @classmethod
    def normalize_locale(cls, v: Optional[str]) -> str:
        """Reduce locales such as 'vi_VN' to their language part"""
        raw = (v or "vi").strip().lower().replace("-", "_")
        return raw.split("_", 1)[0]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
