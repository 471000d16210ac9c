"""Tests for conflict detection."""

from uuid import uuid4

from core.domain.models import CalendarEvent, OverlapKind
from core.services.conflicts import ConflictDetector
from tests.conftest import at


def event(start, end, title="Existing"):
    return CalendarEvent(
        id=uuid4(), user_id=uuid4(), title=title, color="#000000",
        start_time=at(start), end_time=at(end),
    )


CANDIDATE = (at("2025-05-01T10:00"), at("2025-05-01T11:00"))


def test_classifies_each_overlap():
    within = event("2025-05-01T10:30", "2025-05-01T10:45", "within")
    encompasses = event("2025-05-01T09:00", "2025-05-01T12:00", "encompasses")
    overlaps_start = event("2025-05-01T09:30", "2025-05-01T10:30", "overlaps_start")

    conflicts = list(ConflictDetector().detect(*CANDIDATE, [within, encompasses, overlaps_start]))

    kinds = {c.event.title: c.overlap_type for c in conflicts}
    assert kinds == {
        "within": OverlapKind.WITHIN,
        "encompasses": OverlapKind.ENCOMPASSES,
        "overlaps_start": OverlapKind.OVERLAPS_START,
    }


def test_ordered_by_start_time():
    late = event("2025-05-01T10:50", "2025-05-01T11:30")
    early = event("2025-05-01T09:00", "2025-05-01T10:15")
    middle = event("2025-05-01T10:20", "2025-05-01T10:40")

    conflicts = list(ConflictDetector().detect(*CANDIDATE, [late, early, middle]))

    assert [c.event.id for c in conflicts] == [early.id, middle.id, late.id]


def test_touching_events_are_not_conflicts():
    before = event("2025-05-01T09:00", "2025-05-01T10:00")
    after = event("2025-05-01T11:00", "2025-05-01T12:00")

    report = ConflictDetector().detect(*CANDIDATE, [before, after])

    assert list(report) == []


def test_report_is_restartable():
    report = ConflictDetector().detect(*CANDIDATE, [event("2025-05-01T10:15", "2025-05-01T10:30")])

    first = list(report)
    second = list(report)

    assert len(first) == 1
    assert first == second
    assert report


def test_report_is_lazy_over_a_generator_input():
    source = (event("2025-05-01T10:%02d" % m, "2025-05-01T10:%02d" % (m + 5)) for m in (0, 10, 20))
    report = ConflictDetector().detect(*CANDIDATE, source)

    assert len(list(report)) == 3
    assert len(list(report)) == 3
