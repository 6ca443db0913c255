"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    APP_NAME: str = "Tripsplit"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "sqlite:///./tripsplit.db"
    DB_ECHO: bool = False
    
    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]
    
    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
    
    # Expenses
    DEFAULT_CURRENCY: str = "JPY"  # Minor unit is the whole yen, no sub-unit fractions
    MAX_MEMBER_NAME_LENGTH: int = 50
    MAX_DESCRIPTION_LENGTH: int = 500
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
