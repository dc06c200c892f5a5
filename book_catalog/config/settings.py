"""
Book Catalog Configuration Settings

This module contains all configuration constants for the catalog server.
Values can be overridden through BOOK_CATALOG_* environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("BOOK_CATALOG_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("BOOK_CATALOG_PORT", "7272"))

    # Record store settings
    BOOKS_PATH: str = os.environ.get("BOOK_CATALOG_BOOKS_PATH", "data/books.json")

    # Cache settings
    CACHE_BACKEND: str = os.environ.get("BOOK_CATALOG_CACHE_BACKEND", "memory")
    CACHE_MAX_KEYS: int = int(os.environ.get("BOOK_CATALOG_CACHE_MAX_KEYS", "10000"))
    REDIS_URL: str = os.environ.get("BOOK_CATALOG_REDIS_URL", "redis://localhost:6379/0")

    # Connection settings
    MAX_REQUEST_LENGTH: int = 65536  # Longest accepted request line, in bytes

    # Logging settings
    DEBUG: bool = os.environ.get("BOOK_CATALOG_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("BOOK_CATALOG_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
