"""
Environment configuration for the booking administration backend.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

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
    )

    # Application
    APP_NAME: str = Field(default="Booking Admin", alias="PROJECT_NAME")
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: str = Field(default="*", alias="BACKEND_CORS_ORIGINS")

    # Database
    DATABASE_URL: str = "sqlite:///./booking_admin.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_ECHO: bool = False

    # Security
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    # 10 days / 12 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 14400
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 17280
    BCRYPT_ROUNDS: int = 12

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_DIR: Optional[str] = None

    # Email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    EMAIL_FROM: str = "reservations@example.com"
    EMAIL_FROM_NAME: str = "Reservations"

    # Calendar service
    CALENDAR_SERVICE_URL: Optional[str] = None
    CALENDAR_ID: str = "primary"
    HOTEL_LOCATION: str = ""

    # Channel manager feeds
    INTEGRATION_TIMEOUT_SECONDS: float = 10.0
    BOOKING_COM_FEED_URL: Optional[str] = None
    BOOKING_COM_USERNAME: Optional[str] = None
    BOOKING_COM_PASSWORD: Optional[str] = None
    AGODA_FEED_URL: Optional[str] = None
    AGODA_USERNAME: Optional[str] = None
    AGODA_PASSWORD: Optional[str] = None

    # Default administrator seeded on startup
    SEED_ADMIN: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "Admin@123"

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """CORS origins parsed from the comma separated setting"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in ("production", "prod")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
