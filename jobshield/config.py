"""
JobShield Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    VERSION: str = "1.0.0"

    # --- AI Provider ---
    AI_PROVIDER: str = os.getenv("JOBSHIELD_AI_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    USE_MOCK_AI: bool = _env_flag("JOBSHIELD_USE_MOCK_AI", "false")

    # A critical hit makes the AI score irrelevant; skip the call by default.
    SKIP_AI_ON_CRITICAL: bool = _env_flag("JOBSHIELD_SKIP_AI_ON_CRITICAL", "true")

    # --- History ---
    HISTORY_DB_PATH: str = os.getenv("JOBSHIELD_HISTORY_DB", "jobshield_history.db")

    # --- Uploads ---
    MAX_UPLOAD_MB: int = int(os.getenv("JOBSHIELD_MAX_UPLOAD_MB", "5"))

    # --- Server ---
    HOST: str = os.getenv("JOBSHIELD_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("JOBSHIELD_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("JOBSHIELD_CORS_ORIGINS", "*")

    @property
    def ai_enabled(self) -> bool:
        """True when a real LLM should back the AI scorer."""
        return not self.USE_MOCK_AI and bool(self.GEMINI_API_KEY)


settings = Settings()
