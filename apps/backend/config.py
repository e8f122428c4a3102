
import os
import logging
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
# This ensures credentials are available regardless of import order
load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        # Environment mode
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.DB_USER = os.getenv("DB_USER", "ADMIN")
        self.DB_PASSWORD = os.getenv("DB_PASSWORD")
        self.DB_DSN = os.getenv("DB_DSN", "corpusdb_high")
        self.DB_WALLET_DIR = os.getenv("DB_WALLET_DIR")

        # Database Connection Pool
        self.DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", "4"))
        self.DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "20"))

        # Even read/write split
        self.DB_READ_POOL_MAX = int(os.getenv("DB_READ_POOL_MAX", str(max(2, self.DB_POOL_MAX // 2))))
        self.DB_WRITE_POOL_MAX = int(os.getenv("DB_WRITE_POOL_MAX", str(max(2, self.DB_POOL_MAX // 2))))

        # CORS
        # Format: "http://localhost:5173,http://localhost:3000,https://admin.example.com"
        allowed_origins_str = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000")
        self.ALLOWED_ORIGINS: List[str] = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]

        # Rate limiting
        self.RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", "true")
        self.RATE_LIMIT_REVIEW = os.getenv("RATE_LIMIT_REVIEW", "30/minute")

        # Review runs
        self.REVIEW_PAGE_SIZE = int(os.getenv("REVIEW_PAGE_SIZE", "1000"))
        self.REVIEW_BATCH_SIZE = int(os.getenv("REVIEW_BATCH_SIZE", "100"))
        self.REVIEW_BATCH_PAUSE_MS = int(os.getenv("REVIEW_BATCH_PAUSE_MS", "100"))
        self.REVIEW_MIN_SENTENCE_CHARS = int(os.getenv("REVIEW_MIN_SENTENCE_CHARS", "5"))

        self._validate_review_settings()

    def _validate_review_settings(self):
        if self.REVIEW_PAGE_SIZE <= 0:
            raise ValueError(f"REVIEW_PAGE_SIZE must be positive, got {self.REVIEW_PAGE_SIZE}")
        if self.REVIEW_BATCH_SIZE <= 0:
            raise ValueError(f"REVIEW_BATCH_SIZE must be positive, got {self.REVIEW_BATCH_SIZE}")
        if self.REVIEW_BATCH_PAUSE_MS < 0:
            raise ValueError(f"REVIEW_BATCH_PAUSE_MS must not be negative, got {self.REVIEW_BATCH_PAUSE_MS}")
        if self.REVIEW_MIN_SENTENCE_CHARS < 1:
            logger.warning("REVIEW_MIN_SENTENCE_CHARS < 1 disables the terminal-period length guard")

    @property
    def review_batch_pause_seconds(self) -> float:
        return self.REVIEW_BATCH_PAUSE_MS / 1000.0


settings = Settings()
