from core.services.calendar_service import CalendarService, validate_payload
from core.services.conflicts import ConflictDetector, ConflictReport
from core.services.recurrence import RecurrenceExpander

__all__ = [
    "CalendarService",
    "ConflictDetector",
    "ConflictReport",
    "RecurrenceExpander",
    "validate_payload",
]
