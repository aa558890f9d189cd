# path: archroute-api/app/core/config.py
"""Environment-driven configuration for the routing service."""

from __future__ import annotations

import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

MAPBOX_TOKEN_PLACEHOLDER = "your_mapbox_token_here"
DEFAULT_DIRECTIONS_BASE_URL = "https://api.mapbox.com/directions/v5/mapbox"


def get_mapbox_token() -> str:
    """Return the Mapbox token, or "" when unset or still the placeholder."""
    token = os.getenv("MAPBOX_ACCESS_TOKEN", "").strip()
    if token == MAPBOX_TOKEN_PLACEHOLDER:
        return ""
    return token


def get_directions_config() -> Dict[str, Any]:
    return {
        "access_token": get_mapbox_token(),
        "base_url": os.getenv("MAPBOX_DIRECTIONS_BASE_URL", DEFAULT_DIRECTIONS_BASE_URL).rstrip("/"),
        "timeout_seconds": float(os.getenv("DIRECTIONS_TIMEOUT_SECONDS", "10")),
    }


def get_openai_config() -> Dict[str, Any]:
    return {
        "api_key": os.getenv("OPENAI_API_KEY", ""),
        "model": os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1"),
        "temperature": float(os.getenv("OPENAI_TEMPERATURE", "0.2")),
    }


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")
