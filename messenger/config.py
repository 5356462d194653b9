# messenger/config.py
from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./messenger.db"

    # Token signing
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 10

    # API configuration
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = [
        "https://meuzishun.github.io",
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]

    # Thread reconstruction
    THREAD_MAX_DEPTH: int = 1000
    THREAD_BATCH_FETCH: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()
