"""
Configuration - environment-driven settings for BiomeCraft
"""

import os
import logging

from dotenv import load_dotenv

from biomecraft import __version__

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

APP_NAME = "BiomeCraft"
APP_VERSION = __version__


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def get_provider() -> str:
    """Get configured LLM provider"""
    return os.getenv("LLM_PROVIDER", "gemini")


def get_model() -> str:
    """Get configured model name"""
    return os.getenv("LLM_MODEL", "gemini-2.5-flash")


def is_debug() -> bool:
    """Whether error responses should include internal details"""
    return os.getenv("BIOMECRAFT_DEBUG", "").lower() in ("1", "true", "yes", "on")


def get_rate_limit_max() -> int:
    """Requests allowed per client within one window"""
    return _get_int("BIOMECRAFT_RATE_LIMIT_MAX", 10)


def get_rate_limit_window() -> int:
    """Rate limit window length in seconds"""
    return _get_int("BIOMECRAFT_RATE_LIMIT_WINDOW", 60)


def get_pack_format() -> int:
    """Datapack format number written to pack.mcmeta (48 = Minecraft 1.21)"""
    return _get_int("BIOMECRAFT_PACK_FORMAT", 48)


def get_namespace() -> str:
    """Namespace generated biomes are registered under"""
    return os.getenv("BIOMECRAFT_NAMESPACE", "custom")


def get_cors_origins() -> list[str]:
    """Origins allowed to call the API from a browser"""
    raw = os.getenv(
        "BIOMECRAFT_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    )
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
