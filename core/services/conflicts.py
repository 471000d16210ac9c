"""
Conflict detection - reports which of an owner's events overlap a candidate interval.
Advisory only: nothing here blocks a write.
"""

from datetime import datetime
from typing import Iterable, Iterator, List

from core.domain.models import CalendarEvent, EventConflict
from core.utils.date_range import classify, overlaps


class ConflictReport:
    """
    Lazy, restartable view of the conflicts for one candidate interval.
    Each iteration re-scans the events it was given, ordered by start time.
    """

    def __init__(self, start_time: datetime, end_time: datetime, events: Iterable[CalendarEvent]):
        self.start_time = start_time
        self.end_time = end_time
        self._events: List[CalendarEvent] = list(events)

    def __iter__(self) -> Iterator[EventConflict]:
        for event in sorted(self._events, key=lambda e: e.start_time):
            if not overlaps(self.start_time, self.end_time, event.start_time, event.end_time):
                continue
            yield EventConflict(
                event=event,
                overlap_type=classify(self.start_time, self.end_time, event.start_time, event.end_time),
            )


class ConflictDetector:
    """Classifies overlaps between a candidate interval and existing events"""

    def detect(
        self,
        start_time: datetime,
        end_time: datetime,
        others: Iterable[CalendarEvent],
    ) -> ConflictReport:
        """The caller excludes the candidate's own event from `others`."""
        return ConflictReport(start_time, end_time, others)
