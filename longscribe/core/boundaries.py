"""Chunk boundary planning over a known total duration.

WHY: The recognizer handles a bounded amount of audio per call, so the
source is cut into fixed-size windows. The last window has to end
exactly at the probed duration, whatever the rounding.

HOW: Cut-points are generated as multiples of the chunk size while they
stay strictly below the duration, then the duration itself is appended.
Windows are adjacent pairs of cut-points; slivers below
MIN_CHUNK_SPAN_S are dropped.

RULES:
- chunk_size <= 0 raises ValueError (never clamped)
- The last cut-point always equals total_duration
- Cut-points are strictly increasing
- Multiples are computed as i * chunk_size, never by repeated addition
"""

from __future__ import annotations

from typing import List

from longscribe.config import MIN_CHUNK_SPAN_S


def plan_boundaries(total_duration: float, chunk_size: float) -> List[float]:
    """Return the cut-points ``[0, c, 2c, ..., total_duration]``.

    Args:
        total_duration: Probed duration of the source in seconds.
        chunk_size: Window length in seconds; must be positive.

    Returns:
        Strictly increasing cut-points ending at total_duration. When
        total_duration > 0 there are at least two entries.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive, got {}".format(chunk_size))

    boundaries: List[float] = []
    i = 0
    while True:
        start = float(i * chunk_size)
        if start >= total_duration:
            break
        boundaries.append(start)
        i += 1

    boundaries.append(float(total_duration))
    return boundaries


def window_is_schedulable(start: float, end: float) -> bool:
    """True when the window ``[start, end)`` is long enough to transcribe."""
    return end - start >= MIN_CHUNK_SPAN_S
