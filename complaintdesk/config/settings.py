"""
Environment configuration for the complaint desk.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Set, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    @staticmethod
    def get_secret_key_default() -> str:
        """Generate a default secret key if not provided"""
        import secrets
        import string
        alphabet = string.ascii_letters + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(32))

    # Application configuration
    APP_NAME: str = "Complaint Desk"
    API_VERSION: str = "v1"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Database configuration
    DATABASE_URL: str = "sqlite:///./complaintdesk.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30

    # Security configuration
    JWT_SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_BCRYPT_ROUNDS: int = 12
    MIN_PASSWORD_LENGTH: int = 6

    # Complaint rules
    MAX_ATTACHMENTS: int = 5
    ALLOWED_ATTACHMENT_TYPES: Set[str] = Field(default={"image/png", "image/jpeg"})
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    NOTIFICATION_FEED_LIMIT: int = 50

    # Change notifier
    NOTIFIER_QUEUE_SIZE: int = 100

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator('ALLOWED_ATTACHMENT_TYPES', mode='before')
    @classmethod
    def parse_attachment_types(cls, v: Union[str, Set[str], List[str]]) -> Set[str]:
        """Parse ALLOWED_ATTACHMENT_TYPES from a comma separated string"""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                try:
                    return {t.strip().lower() for t in json.loads(v)}
                except json.JSONDecodeError:
                    pass
            return {t.strip().lower() for t in v.split(",") if t.strip()}
        return {t.lower() for t in v}

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def get_database_url(self) -> str:
        """Return the configured database URL"""
        return self.DATABASE_URL

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
