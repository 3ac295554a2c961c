"""
Range partitioning into fixed-size sub-intervals.

The produced sequence is contiguous and gap-free: each sub-interval starts
where the previous one ended and the last one ends exactly at the global end.
"""

from typing import Iterator

from .models import SubInterval


def align_down(ts: int, interval: int) -> int:
    """Truncate a timestamp down to the nearest multiple of interval."""
    if interval <= 0:
        raise ValueError(f"Interval must be positive, got {interval}")
    return ts - (ts % interval)


def iter_subintervals(
    start: int,
    end: int,
    interval: int,
    align: bool = False,
) -> Iterator[SubInterval]:
    """
    Yield consecutive sub-intervals covering [start, end).

    Args:
        start: Global start (Unix seconds, inclusive)
        end: Global end (Unix seconds, exclusive)
        interval: Sub-interval length in seconds
        align: Truncate the first start down to an interval boundary

    Yields:
        SubInterval objects in chronological order
    """
    if interval <= 0:
        raise ValueError(f"Interval must be positive, got {interval}")

    s = align_down(start, interval) if align else start
    while s < end:
        e = min(s + interval, end)
        yield SubInterval(start=s, end=e)
        s = e


def count_subintervals(start: int, end: int, interval: int, align: bool = False) -> int:
    """Number of sub-intervals iter_subintervals would produce."""
    if interval <= 0:
        raise ValueError(f"Interval must be positive, got {interval}")
    s = align_down(start, interval) if align else start
    if s >= end:
        return 0
    return -(-(end - s) // interval)
