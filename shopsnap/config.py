"""
Configuration settings for ShopSnap Backend
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class Config:
    """Base configuration class."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    DEBUG = False
    TESTING = False

    # Storage backend: "memory" (process-local map) or "sqlite"
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory").lower()
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///shopsnap.db"
    SEED_DATA = _env_flag("SEED_DATA", "true")

    # Optional JSON file replacing the built-in aisle taxonomy
    TAXONOMY_FILE = os.environ.get("TAXONOMY_FILE")

    # Rate limiting (requests/min per IP)
    RATE_LIMIT_PER_MINUTE = int(os.environ.get("RATE_LIMIT_PER_MINUTE", 60))

    # Cache settings for price comparison results
    CACHE_TTL_SECONDS = int(os.environ.get("CACHE_TTL_SECONDS", 300))
    CACHE_MAX_SIZE = int(os.environ.get("CACHE_MAX_SIZE", 100))

    # External OCR provider
    OCR_API_URL = os.environ.get("OCR_API_URL", "http://localhost:8884/ocr")
    OCR_API_KEY = os.environ.get("OCR_API_KEY")
    OCR_TIMEOUT = int(os.environ.get("OCR_TIMEOUT", 30))
    OCR_LANGUAGE = os.environ.get("OCR_LANGUAGE", "eng")
    USER_AGENT = os.environ.get("USER_AGENT", "ShopSnap/1.0")

    # Return a placeholder item instead of an error when OCR fails
    OCR_FALLBACK_PLACEHOLDER = _env_flag("OCR_FALLBACK_PLACEHOLDER", "true")

    # Retry settings (exponential backoff)
    MAX_RETRIES = int(os.environ.get("MAX_RETRIES", 3))
    RETRY_BACKOFF_FACTOR = float(os.environ.get("RETRY_BACKOFF_FACTOR", 2.0))

    # Input limits
    MAX_ITEM_TEXT_LENGTH = int(os.environ.get("MAX_ITEM_TEXT_LENGTH", 1000))
    MAX_ITEMS_PER_LIST = int(os.environ.get("MAX_ITEMS_PER_LIST", 500))
    MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", 10 * 1024 * 1024))
    MAX_CONTENT_LENGTH = MAX_UPLOAD_BYTES

    # Store locator
    DEFAULT_SEARCH_RADIUS_KM = float(os.environ.get("DEFAULT_SEARCH_RADIUS_KM", 5.0))
    MAX_SEARCH_RADIUS_KM = float(os.environ.get("MAX_SEARCH_RADIUS_KM", 100.0))


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "sqlite").lower()


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = "memory"
    SEED_DATA = True
    TAXONOMY_FILE = None
    RATE_LIMIT_PER_MINUTE = 10000
    OCR_API_URL = "http://ocr.test/ocr"
    MAX_RETRIES = 0


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
