"""
Klartext Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "1.0.0"
    API_VERSION: str = "1"

    # --- Validation ---
    MIN_TEXT_LENGTH: int = int(os.getenv("KLARTEXT_MIN_TEXT_LENGTH", "20"))
    # Upper bound keeps regex evaluation time predictable on OCR garbage
    MAX_TEXT_LENGTH: int = int(os.getenv("KLARTEXT_MAX_TEXT_LENGTH", "50000"))

    # --- History ---
    HISTORY_DB_PATH: str = os.getenv("KLARTEXT_HISTORY_DB", "klartext_history.db")
    HISTORY_MAX_ENTRIES: int = int(os.getenv("KLARTEXT_HISTORY_MAX_ENTRIES", "20"))

    # --- Server ---
    HOST: str = os.getenv("KLARTEXT_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("KLARTEXT_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("KLARTEXT_CORS_ORIGINS", "*")


settings = Settings()
