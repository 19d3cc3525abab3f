import os
import sys
from dotenv import load_dotenv

from todo_core.database import DatabaseConfig

load_dotenv()


def _env_int(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        print("=" * 70)
        print(f"CRITICAL ERROR: {name} must be an integer, got '{value}'")
        print("=" * 70)
        sys.exit(1)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


# Detect environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# API Configuration
API_VERSION = "1.0.0"
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = _env_int("API_PORT", "8000")
API_WORKERS = _env_int("API_WORKERS", "1")

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///todolist.db")
DB_POOL_SIZE = _env_int("DB_POOL_SIZE", "5")
DB_MAX_OVERFLOW = _env_int("DB_MAX_OVERFLOW", "10")
DB_POOL_TIMEOUT = _env_int("DB_POOL_TIMEOUT", "30")
DB_POOL_RECYCLE = _env_int("DB_POOL_RECYCLE", "3600")
DB_ECHO = _env_bool("DB_ECHO", "false")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
LOG_JSON = _env_bool("LOG_JSON", "false")

# CORS: any origin unless restricted
ALLOWED_ORIGINS_STR = os.getenv("ALLOWED_ORIGINS", "*")
ALLOWED_ORIGINS = [origin.strip() for origin in ALLOWED_ORIGINS_STR.split(",") if origin.strip()]


def database_config() -> DatabaseConfig:
    """Build the store configuration from the environment"""
    return DatabaseConfig(
        database_url=DATABASE_URL,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_recycle=DB_POOL_RECYCLE,
        echo=DB_ECHO,
    )
