"""
Operations on a day's open time, kept as an ordered list of disjoint intervals.
"""

from typing import Iterable, List

from .models import Interval


def normalize(windows: Iterable[Interval]) -> List[Interval]:
    """Return the windows sorted by start time."""
    return sorted(windows, key=lambda w: (w.start, w.end))


def subtract(windows: Iterable[Interval], cut: Interval) -> List[Interval]:
    """
    Remove ``cut`` from every window.

    Example:
    Windows: [09:00-17:00]
    Cut: 12:00-13:00
    Result: [09:00-12:00, 13:00-17:00]

    A cut covering a window entirely removes it.
    """
    result: List[Interval] = []

    for window in windows:
        if not window.overlaps(cut):
            result.append(window)
            continue

        left = Interval.between(window.start, cut.start)
        if left:
            result.append(left)

        right = Interval.between(cut.end, window.end)
        if right:
            result.append(right)

    return normalize(result)


def subtract_all(windows: Iterable[Interval], cuts: Iterable[Interval]) -> List[Interval]:
    """Apply ``subtract`` for each cut in turn."""
    result = normalize(windows)
    for cut in cuts:
        result = subtract(result, cut)
    return result


def fits(windows: Iterable[Interval], start: int, duration_minutes: int) -> bool:
    """Check whether ``[start, start + duration)`` lies inside a single window."""
    end = start + duration_minutes
    return any(window.contains(start, end) for window in windows)
