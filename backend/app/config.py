#!/usr/bin/env python3
"""
Configuration management for the barista chat backend.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuration class for the application."""

    # Catalog database (SQLite file by default, any SQLAlchemy URL works)
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{os.path.abspath(os.path.join(_DATA_DIR, 'rabuste.db'))}",
    )
    SEED_ON_STARTUP = _env_bool("SEED_ON_STARTUP", "true")

    # Catalog reads are bounded; a timeout is handled like a failed read
    CATALOG_TIMEOUT_SECONDS = float(os.getenv("CATALOG_TIMEOUT_SECONDS", "2.0"))
    CATALOG_WORKERS = int(os.getenv("CATALOG_WORKERS", "4"))

    # Session memory (process-local, LRU with TTL)
    SESSION_TTL_SECONDS = float(os.getenv("SESSION_TTL_SECONDS", "1800"))
    SESSION_MAX_ENTRIES = int(os.getenv("SESSION_MAX_ENTRIES", "10000"))
    SESSION_LOCK_SHARDS = int(os.getenv("SESSION_LOCK_SHARDS", "64"))

    # Knowledge fallback
    KNOWLEDGE_FILE = os.getenv(
        "KNOWLEDGE_FILE",
        os.path.abspath(os.path.join(_DATA_DIR, "raw", "knowledge.json")),
    )
    KNOWLEDGE_SCORE_CUTOFF = float(os.getenv("KNOWLEDGE_SCORE_CUTOFF", "80"))

    # Presentation
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls):
        """Validate that configuration values are usable."""
        invalid = []

        if not cls.DATABASE_URL:
            invalid.append("DATABASE_URL")
        if cls.CATALOG_TIMEOUT_SECONDS <= 0:
            invalid.append("CATALOG_TIMEOUT_SECONDS")
        if cls.CATALOG_WORKERS < 1:
            invalid.append("CATALOG_WORKERS")
        if cls.SESSION_TTL_SECONDS <= 0:
            invalid.append("SESSION_TTL_SECONDS")
        if cls.SESSION_MAX_ENTRIES < 1:
            invalid.append("SESSION_MAX_ENTRIES")
        if cls.SESSION_LOCK_SHARDS < 1:
            invalid.append("SESSION_LOCK_SHARDS")
        if not 0 <= cls.KNOWLEDGE_SCORE_CUTOFF <= 100:
            invalid.append("KNOWLEDGE_SCORE_CUTOFF")
        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            invalid.append("LOG_LEVEL")

        if invalid:
            raise ValueError(f"Invalid configuration: {', '.join(invalid)}")

        return True

# Validate configuration on import
Config.validate()
