from __future__ import annotations

import math
from typing import Optional


def format_hours(hours: Optional[float]) -> str:
    """Compact duration: minutes under an hour, hours under a day, else days."""
    if hours is None or (isinstance(hours, float) and math.isnan(hours)):
        return "N/A"
    hours = float(hours)
    if hours < 1:
        return f"{round(hours * 60)}m"
    if hours < 24:
        return f"{round(hours, 1):g}h"
    return f"{round(hours / 24, 1):g}d"
