# path: archroute-api/app/core/logging_config.py

from __future__ import annotations

import logging
from typing import Optional

from app.core.config import get_log_level


def configure_logging(level_name: Optional[str] = None) -> int:
    """Basic root logging setup; returns the numeric level applied."""
    level_name = level_name or get_log_level()
    level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # httpx logs every request at INFO, which would leak the access_token query param.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info("Logging configured, level=%s", level_name)
    return level
