"""
Configuration settings for the Dynamic Fields Backend
"""

import os
import logging

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", 5432))
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")

# Encrypted transport, certificate validation relaxed unless asked for
DB_SSL = _env_flag("DB_SSL", True)
DB_SSL_REJECT_UNAUTHORIZED = _env_flag("DB_SSL_REJECT_UNAUTHORIZED", False)

# Pool settings (timeouts in seconds)
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_CONNECTION_TIMEOUT = float(os.getenv("DB_CONNECTION_TIMEOUT", 2.0))
DB_IDLE_TIMEOUT = float(os.getenv("DB_IDLE_TIMEOUT", 30.0))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Create tables on startup
DB_INIT_SCHEMA = _env_flag("DB_INIT_SCHEMA", False)

PORT = int(os.getenv("PORT", 3000))

# CORS settings - permissive unless origins are listed
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

# Validate required environment variables
if not DATABASE_URL and not DB_NAME:
    raise ValueError("DATABASE_URL or DB_NAME environment variable is required")

if DB_POOL_MIN_SIZE > DB_POOL_MAX_SIZE:
    raise ValueError("DB_POOL_MIN_SIZE cannot be greater than DB_POOL_MAX_SIZE")

logger.info(f"Database target: {DB_HOST if not DATABASE_URL else 'DATABASE_URL'} (ssl={DB_SSL}, pool max={DB_POOL_MAX_SIZE})")
