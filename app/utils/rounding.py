"""Rounding helpers for derived progress and statistics fields.

Python's ``round`` uses banker's rounding; the web client rounds half-up,
so derived values are computed the same way here to keep both sides in
agreement (``round_half_up(2.5) == 3``).
"""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` half-up to ``digits`` decimal places."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: float, whole: float) -> int:
    """Integer percent of ``part`` in ``whole``; 0 when ``whole`` is not positive.

    Not clamped: a part larger than the whole yields more than 100.
    """
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))
