import os
import logging
from dotenv import load_dotenv

# Load .env file if exists
load_dotenv()

# Configuration
ENV_NAME = os.environ.get("ENV_NAME", "staging")
PORT = int(os.environ.get("PORT", 8111))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./data.db")

MAX_CHECKS = int(os.environ.get("MAX_CHECKS", 5))
TOKEN_TTL_MS = int(os.environ.get("TOKEN_TTL_MS", 1000 * 60 * 60))  # 1 hour
DEFAULT_CHECK_TIMEOUT_SECONDS = int(os.environ.get("DEFAULT_CHECK_TIMEOUT_SECONDS", 5))

PHONE_LENGTH = 10
ID_LENGTH = 20
PROTOCOLS = ("http", "https")
CHECK_METHODS = ("post", "get", "put", "delete")
MIN_TIMEOUT_SECONDS = 1
MAX_TIMEOUT_SECONDS = 5


def get_log_level() -> int:
    """Resolves LOG_LEVEL into a logging level, defaulting to INFO"""
    level = getattr(logging, LOG_LEVEL.strip().upper(), None)
    if not isinstance(level, int):
        logging.warning(f"Invalid LOG_LEVEL '{LOG_LEVEL}', defaulting to INFO")
        return logging.INFO
    return level
