"""
Configuration module for Pastebin Lite.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "paste:")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "redis").lower()
    # Empty means "build share URLs from the incoming request"
    APP_DOMAIN: str = os.getenv("APP_DOMAIN", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))


settings = Settings()
