# path: archroute-api/app/utils/formatting.py

from __future__ import annotations

import math


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    # half up, not round()'s half-to-even
    return f"{math.floor(meters + 0.5)} m"


def format_duration(seconds: float) -> str:
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
