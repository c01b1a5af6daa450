"""
config.py

Central place to load environment variables.

The Gemini API key is read on the server side only.
It is never shipped to a browser or returned by any endpoint.
"""

from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv

# Load variables from .env file into environment
load_dotenv()

# Version reported by the health endpoint
SERVICE_VERSION = "2.0.0"

# Files accepted for analysis
SUPPORTED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
)

# 10 MB
MAX_FILE_SIZE = 10 * 1024 * 1024

# Fixed value, the AI service gives no real confidence signal
EXTRACTION_CONFIDENCE = 95

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_SERVER_URL = "http://localhost:8000"


def _env(key: str) -> Optional[str]:
    value = os.getenv(key)
    return value.strip() if isinstance(value, str) and value.strip() else None


@dataclass(frozen=True)
class Settings:
    """
    Settings

    Snapshot of the process environment taken when the app starts.
    """

    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_api_base: str = DEFAULT_GEMINI_API_BASE
    environment: str = "development"
    log_level: str = "INFO"
    server_url: str = DEFAULT_SERVER_URL

    @property
    def api_key_configured(self) -> bool:
        return bool(self.gemini_api_key)


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Variables:
    - GEMINI_API_KEY (required for analysis, no default)
    - GEMINI_MODEL
    - GEMINI_API_BASE
    - APP_ENV
    - LOG_LEVEL
    - CHECKVISION_SERVER_URL (used by the CLI client)
    """
    return Settings(
        gemini_api_key=_env("GEMINI_API_KEY"),
        gemini_model=_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        gemini_api_base=(_env("GEMINI_API_BASE") or DEFAULT_GEMINI_API_BASE).rstrip("/"),
        environment=_env("APP_ENV") or "development",
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        server_url=(_env("CHECKVISION_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
    )
