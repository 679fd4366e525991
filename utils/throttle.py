"""Spacing between consecutive tcgcsv.com downloads."""

from __future__ import annotations

import random
import time
from typing import Tuple


def polite_sleep(delay_range: Tuple[float, float]) -> float:
    """Sleep for a random interval within ``delay_range``.

    Parameters
    ----------
    delay_range:
        Two-tuple of ``(min_seconds, max_seconds)``. A range whose upper
        bound is zero or less disables the pause.

    Returns
    -------
    float
        The actual number of seconds slept.
    """
    low, high = delay_range
    if high <= 0:
        return 0.0
    delay = random.uniform(max(low, 0.0), high)
    time.sleep(delay)
    return delay
