# chat_analyzer/config/settings.py
import os
import logging
from dotenv import load_dotenv
from typing import List, Optional

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _int_list(raw: Optional[str], name: str) -> List[int]:
    if not raw:
        return []
    try:
        return [int(id_str.strip()) for id_str in raw.split(',') if id_str.strip()]
    except ValueError:
        logger.error(f"Invalid {name} format. Should be comma-separated integers.")
        return []


class Settings:
    """Application settings loaded from environment variables."""

    # Logging level
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # HTTP upload API
    HTTP_HOST: str = os.getenv("HTTP_HOST", "0.0.0.0")
    HTTP_PORT: int = int(os.getenv("HTTP_PORT", "5000"))
    # When set, requests must carry a matching X-API-Key header
    API_KEY: Optional[str] = os.getenv("API_KEY") or None
    CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(',') if o.strip()]
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Parsing and aggregation
    CHAT_HEADER_DIALECTS: List[str] = os.getenv("CHAT_HEADER_DIALECTS", "day_first,month_first").split(',')
    WINDOW_DAYS: int = int(os.getenv("WINDOW_DAYS", "7"))
    POWER_USER_MIN_DAYS: int = int(os.getenv("POWER_USER_MIN_DAYS", "4"))

    # Optional Telegram front end
    TELEGRAM_BOT_TOKEN: Optional[str] = os.getenv("TELEGRAM_BOT_TOKEN") or None
    ALLOWED_USER_IDS: List[int] = _int_list(os.getenv("ALLOWED_USER_IDS"), "ALLOWED_USER_IDS")

    def __init__(self):
        if self.WINDOW_DAYS < 1 or self.POWER_USER_MIN_DAYS < 1:
            logger.critical("WINDOW_DAYS and POWER_USER_MIN_DAYS must be positive integers.")
            raise ValueError("WINDOW_DAYS and POWER_USER_MIN_DAYS must be positive integers.")
        if not self.TELEGRAM_BOT_TOKEN:
            logger.info("TELEGRAM_BOT_TOKEN is not set. Telegram front end disabled.")
        elif not self.ALLOWED_USER_IDS:
            logger.warning("ALLOWED_USER_IDS is not set. The Telegram bot will answer anyone.")

        logger.info("Settings loaded.")
        logger.info(f"Header dialects: {self.CHAT_HEADER_DIALECTS}")
        logger.info(f"Window: {self.WINDOW_DAYS} days, power users from {self.POWER_USER_MIN_DAYS} active days")
        logger.info(f"Log Level: {self.LOG_LEVEL}")


# Single instance of settings to be imported by other modules
settings = Settings()
