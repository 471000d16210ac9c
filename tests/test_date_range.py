"""Tests for interval overlap, classification and calendar arithmetic."""

import pytest

from core.domain.models import OverlapKind
from core.utils.date_range import add_interval, classify, overlaps
from tests.conftest import at


QUERY = (at("2025-03-10T10:00"), at("2025-03-10T11:00"))


class TestOverlaps:

    def test_partial_overlap(self):
        assert overlaps(*QUERY, at("2025-03-10T10:30"), at("2025-03-10T12:00"))

    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(*QUERY, at("2025-03-10T11:00"), at("2025-03-10T12:00"))
        assert not overlaps(*QUERY, at("2025-03-10T09:00"), at("2025-03-10T10:00"))

    def test_disjoint(self):
        assert not overlaps(*QUERY, at("2025-03-11T10:00"), at("2025-03-11T11:00"))

    def test_identical_intervals_overlap(self):
        assert overlaps(*QUERY, *QUERY)


class TestClassify:

    @pytest.mark.parametrize("b_start, b_end, expected", [
        ("2025-03-10T09:00", "2025-03-10T12:00", OverlapKind.ENCOMPASSES),
        ("2025-03-10T10:30", "2025-03-10T10:45", OverlapKind.WITHIN),
        ("2025-03-10T10:00", "2025-03-10T11:00", OverlapKind.WITHIN),
        ("2025-03-10T09:30", "2025-03-10T10:30", OverlapKind.OVERLAPS_START),
        ("2025-03-10T10:30", "2025-03-10T11:30", OverlapKind.OVERLAPS_END),
        ("2025-03-10T09:00", "2025-03-10T11:00", OverlapKind.OVERLAPS_START),
        ("2025-03-10T10:00", "2025-03-10T12:00", OverlapKind.OVERLAPS_END),
    ])
    def test_kinds(self, b_start, b_end, expected):
        assert classify(*QUERY, at(b_start), at(b_end)) == expected

    def test_non_overlapping_input_falls_back_to_adjacent(self):
        assert classify(*QUERY, at("2025-03-10T11:00"), at("2025-03-10T12:00")) == OverlapKind.ADJACENT

    def test_repeated_calls_agree(self):
        b = (at("2025-03-10T09:30"), at("2025-03-10T10:30"))
        assert classify(*QUERY, *b) == classify(*QUERY, *b)


class TestAddInterval:

    def test_days_and_weeks(self):
        start = at("2025-01-01T10:00")
        assert add_interval(start, "day", 31) == at("2025-02-01T10:00")
        assert add_interval(start, "week", 1) == at("2025-01-08T10:00")

    def test_month_clamps_to_end_of_month(self):
        assert add_interval(at("2025-01-31T09:00"), "month", 1) == at("2025-02-28T09:00")
        assert add_interval(at("2024-01-31T09:00"), "month", 1) == at("2024-02-29T09:00")
        assert add_interval(at("2025-01-31T09:00"), "month", 3) == at("2025-04-30T09:00")

    def test_month_rolls_over_year(self):
        assert add_interval(at("2025-11-15T09:00"), "month", 3) == at("2026-02-15T09:00")

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            add_interval(at("2025-01-01T00:00"), "fortnight", 1)
