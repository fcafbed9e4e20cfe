"""
Configuration management for SmartMeal backend
"""
import sys
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

BACKEND_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BACKEND_DIR.parent


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "SmartMeal Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./smartmeal.db"

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120  # 2 hours

    # Claude API (chat assistant)
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    CLAUDE_MAX_TOKENS: int = 1024

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"
    FRONTEND_BUILD_DIR: Path = PROJECT_ROOT / "frontend" / "dist"

    # JSON documents
    SERVER_ROOT: Path = BACKEND_DIR
    DATA_DIR: Path = BACKEND_DIR / "data"
    PUBLIC_DATA_DIR: Path = PROJECT_ROOT / "frontend" / "public" / "data"

    # Model trainer
    PYTHON_CMD: str = sys.executable
    TRAINER_SCRIPT: str = "train_model.py"
    TRAINER_EPISODES: int = 200
    TRAINER_DIAGNOSTIC_LIMIT: int = 200

    # Daily archive job (local time)
    ARCHIVE_SCHEDULER_ENABLED: bool = True
    ARCHIVE_HOUR: int = 0
    ARCHIVE_MINUTE: int = 0

    # Food listings drop out of the available view after this many hours
    FOOD_FRESHNESS_HOURS: int = 2

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
