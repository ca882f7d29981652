"""
Centralized configuration for the ingredient AI service.
Values are read from the environment (backend/.env is loaded by the app) and
resolved once into a Settings object that is handed to the app factory.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# backend/core/config.py -> parent=core, parent.parent=backend
_BACKEND_DIR = Path(__file__).resolve().parent.parent

DEFAULT_OPENAI_API_BASE = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_TIMEOUT = 30
DEFAULT_HISTORY_LIMIT = 20


def get_env_path() -> Path:
    return _BACKEND_DIR / ".env"


# --- OpenAI (lazy read from env) ---
def get_openai_api_key() -> str:
    return os.environ.get("OPENAI_API_KEY", "").strip()

def get_openai_api_base() -> str:
    return os.environ.get("OPENAI_API_BASE", DEFAULT_OPENAI_API_BASE).strip().rstrip("/")

def get_openai_model() -> str:
    return os.environ.get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL).strip()

def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("CONFIG ignoring non-integer %s=%r, using %d", name, raw, default)
        return default

def get_openai_timeout() -> int:
    return _int_env("OPENAI_TIMEOUT", DEFAULT_OPENAI_TIMEOUT)

def get_history_limit() -> int:
    return _int_env("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_api_base: str = DEFAULT_OPENAI_API_BASE
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_timeout: int = DEFAULT_OPENAI_TIMEOUT
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    """Snapshot the current environment into a Settings value."""
    return Settings(
        openai_api_key=get_openai_api_key(),
        openai_api_base=get_openai_api_base(),
        openai_model=get_openai_model(),
        openai_timeout=get_openai_timeout(),
        history_limit=get_history_limit(),
    )


# --- Startup logging ---
def log_config(settings: Settings) -> None:
    logger.info(
        "CONFIG: openai_key=%s openai_base=%s openai_model=%s openai_timeout=%ds history_limit=%d",
        settings.has_api_key, settings.openai_api_base, settings.openai_model,
        settings.openai_timeout, settings.history_limit,
    )
    if not settings.has_api_key:
        logger.warning("CONFIG OPENAI_API_KEY is not set; AI endpoints will answer 500")
