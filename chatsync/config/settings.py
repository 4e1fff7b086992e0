"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str, default: str) -> float | None:
    raw = os.getenv(name, default).strip()
    return float(raw) if raw else None


class Config:
    # Backend transport
    BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:4943")
    BACKEND_API_TIMEOUT = float(os.getenv("BACKEND_API_TIMEOUT", "10"))
    # After a connection failure, mutations are refused for this long before the next attempt
    BACKEND_RETRY_SECONDS = float(os.getenv("BACKEND_RETRY_SECONDS", "5"))

    # Polling
    POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "1"))

    # Freshness windows per entity class (seconds)
    CHAT_LIST_STALE_SECONDS = float(os.getenv("CHAT_LIST_STALE_SECONDS", "5"))
    MESSAGES_STALE_SECONDS = float(os.getenv("MESSAGES_STALE_SECONDS", "3"))
    USER_STALE_SECONDS = float(os.getenv("USER_STALE_SECONDS", "30"))
    FILE_LIST_STALE_SECONDS = float(os.getenv("FILE_LIST_STALE_SECONDS", "300"))
    # Empty = fresh until explicitly invalidated
    FILE_REFERENCE_STALE_SECONDS = _optional_float("FILE_REFERENCE_STALE_SECONDS", "")

    # Codec
    MAX_LIST_LENGTH = int(os.getenv("MAX_LIST_LENGTH", "100000"))

    # Domain limits
    USER_BIO_MAX_LENGTH = int(os.getenv("USER_BIO_MAX_LENGTH", "150"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s [%(levelname)s] %(name)s [%(correlation_id)s] %(message)s",
    )
