"""
Display formatting helpers shared by dashboard and public statistics views.
"""

import math
from datetime import timedelta

HOUR_SECONDS = 3600


def format_duration(delta: timedelta) -> str:
    """
    Render a positive duration the way countdown badges show it.

    Examples:
        ``timedelta(days=2, hours=3)`` -> ``"2d 3h"``
        ``timedelta(hours=4, minutes=30)`` -> ``"4h 30m"``
        ``timedelta(minutes=12)`` -> ``"12m"``
    """
    total_seconds = int(delta.total_seconds())
    hours = total_seconds // HOUR_SECONDS
    minutes = (total_seconds % HOUR_SECONDS) // 60

    if hours > 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_percentage(rate: float) -> str:
    """Format a 0..1 rate as a percentage rounded half up, e.g. ``0.666`` -> ``"67%"``."""
    return f"{math.floor(rate * 100 + 0.5)}%"
