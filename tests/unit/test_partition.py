"""Tests for range partitioning."""

import pytest

from logs_downloader.core.models import SubInterval
from logs_downloader.core.partition import (
    align_down,
    count_subintervals,
    iter_subintervals,
)


class TestIterSubintervals:
    """Tests for iter_subintervals."""

    def test_last_interval_is_shorter(self):
        """Test the 0..150 range in 60 second slices."""
        result = list(iter_subintervals(0, 150, 60))

        assert result == [
            SubInterval(0, 60),
            SubInterval(60, 120),
            SubInterval(120, 150),
        ]

    def test_exact_multiple(self):
        """Test a range that divides evenly."""
        result = list(iter_subintervals(100, 280, 60))

        assert [(i.start, i.end) for i in result] == [(100, 160), (160, 220), (220, 280)]

    def test_range_shorter_than_interval(self):
        """Test a single short sub-interval."""
        result = list(iter_subintervals(10, 25, 3600))

        assert result == [SubInterval(10, 25)]

    def test_empty_range(self):
        """Test that start >= end yields nothing."""
        assert list(iter_subintervals(50, 50, 10)) == []
        assert list(iter_subintervals(60, 50, 10)) == []

    @pytest.mark.parametrize(
        "start,end,interval",
        [
            (0, 1, 1),
            (7, 1000, 13),
            (1500000000, 1500003599, 60),
            (1500000030, 1500086400, 86400),
            (42, 43, 86400),
        ],
    )
    def test_tiles_range_exactly(self, start, end, interval):
        """Test contiguity, no overlap, and exact coverage."""
        result = list(iter_subintervals(start, end, interval))

        assert result[0].start == start
        assert result[-1].end == end
        for prev, cur in zip(result, result[1:]):
            assert cur.start == prev.end
        for item in result:
            assert 0 < item.duration <= interval
        assert sum(item.duration for item in result) == end - start
        assert len(result) == count_subintervals(start, end, interval)

    def test_align_truncates_first_start(self):
        """Test that align moves the first start down to a boundary."""
        result = list(iter_subintervals(90, 200, 60, align=True))

        assert [(i.start, i.end) for i in result] == [(60, 120), (120, 180), (180, 200)]

    def test_align_on_boundary_is_noop(self):
        """Test align with an already aligned start."""
        assert list(iter_subintervals(120, 200, 60, align=True)) == list(
            iter_subintervals(120, 200, 60)
        )

    def test_invalid_interval(self):
        """Test that a non-positive interval is rejected."""
        with pytest.raises(ValueError):
            list(iter_subintervals(0, 100, 0))


class TestHelpers:
    """Tests for align_down and count_subintervals."""

    def test_align_down(self):
        assert align_down(125, 60) == 120
        assert align_down(120, 60) == 120
        assert align_down(59, 60) == 0

    def test_count_subintervals(self):
        assert count_subintervals(0, 150, 60) == 3
        assert count_subintervals(0, 120, 60) == 2
        assert count_subintervals(90, 200, 60, align=True) == 3
        assert count_subintervals(10, 10, 60) == 0
