"""
Environment-driven settings.

All configuration is read from environment variables (optionally populated
from a .env file by the entry points via python-dotenv).

Environment Variables:
- STORY_MODEL: Default text model spec (default: gpt-4o-mini)
- STORY_LENGTH: "short" (600-900 chars) or "long" (1200-1500 chars, default)
- UPSTREAM_TIMEOUT_SECONDS: Timeout passed to upstream SDK clients (default: 60)
- DUPLICATE_PRECHECK_ENABLED: Advisory content_hash lookup before insert (default: true)
- TTS_MODEL: Speech model (default: tts-1)
- TTS_DEFAULT_VOICE: Fallback voice for unknown voice ids (default: onyx)
- STORY_REGISTRY_DB_PATH: SQLite file (default: ./data/story_registry.db)
- LOG_LEVEL / LOG_DIR: Logging level and log file directory
- CORS_ALLOW_ORIGINS: Comma-separated allowed origins (default: *)
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

DEFAULT_STORY_MODEL = "gpt-4o-mini"
DEFAULT_TTS_MODEL = "tts-1"
DEFAULT_VOICE = "onyx"
DEFAULT_DB_PATH = "./data/story_registry.db"

# Character bands for generated story content
LENGTH_BANDS = {
    "short": (600, 900),
    "long": (1200, 1500),
}
DEFAULT_LENGTH = "long"


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    val = os.getenv(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    val = os.getenv(key)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            logger.warning(f"[Settings] Invalid integer for {key}: {val}, using default: {default}")
    return default


def _get_env_list(key: str, default: List[str]) -> List[str]:
    """Get comma-separated list from environment variable."""
    val = os.getenv(key)
    if not val:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


@dataclass
class Settings:
    """Resolved runtime configuration."""
    story_model: str = DEFAULT_STORY_MODEL
    story_length: str = DEFAULT_LENGTH
    upstream_timeout: int = 60
    duplicate_precheck: bool = True
    tts_model: str = DEFAULT_TTS_MODEL
    default_voice: str = DEFAULT_VOICE
    db_path: str = DEFAULT_DB_PATH
    log_level: str = "INFO"
    log_dir: str = "logs"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def length_band(self) -> tuple:
        """(min_chars, max_chars) for the configured story length."""
        return LENGTH_BANDS.get(self.story_length, LENGTH_BANDS[DEFAULT_LENGTH])


def get_settings() -> Settings:
    """
    Build Settings from the current environment.

    Read on every call so tests and CLI flags can adjust the environment
    without reloading modules.
    """
    story_length = os.getenv("STORY_LENGTH", DEFAULT_LENGTH).lower()
    if story_length not in LENGTH_BANDS:
        logger.warning(f"[Settings] Unknown STORY_LENGTH '{story_length}', using '{DEFAULT_LENGTH}'")
        story_length = DEFAULT_LENGTH

    return Settings(
        story_model=os.getenv("STORY_MODEL", DEFAULT_STORY_MODEL),
        story_length=story_length,
        upstream_timeout=_get_env_int("UPSTREAM_TIMEOUT_SECONDS", 60),
        duplicate_precheck=_get_env_bool("DUPLICATE_PRECHECK_ENABLED", True),
        tts_model=os.getenv("TTS_MODEL", DEFAULT_TTS_MODEL),
        default_voice=os.getenv("TTS_DEFAULT_VOICE", DEFAULT_VOICE),
        db_path=os.getenv("STORY_REGISTRY_DB_PATH", DEFAULT_DB_PATH),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR", "logs"),
        cors_origins=_get_env_list("CORS_ALLOW_ORIGINS", ["*"]),
    )
