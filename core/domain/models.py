"""
Domain models - the core of business logic.
These models are transport-agnostic (work with the HTTP API, batch jobs, tests, etc.)
"""

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from enum import Enum

from core.domain.constants import COLOR_PATTERN, MAX_CATEGORY_LENGTH, MAX_TITLE_LENGTH


# === ENUMS ===

class Recurrence(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class OverlapKind(str, Enum):
    """How an existing event sits relative to a query interval"""
    ENCOMPASSES = "encompasses"
    WITHIN = "within"
    OVERLAPS_START = "overlaps_start"
    OVERLAPS_END = "overlaps_end"
    ADJACENT = "adjacent"


class BatchOperationType(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# === CALENDAR EVENT ===

class CalendarEventBase(BaseModel):
    """Fields shared by every writable event payload"""
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    color: str = Field(pattern=COLOR_PATTERN)
    notes: Optional[str] = None
    start_time: AwareDatetime
    end_time: AwareDatetime
    recurrence: Recurrence = Recurrence.NONE
    category: Optional[str] = Field(default=None, max_length=MAX_CATEGORY_LENGTH)

    @model_validator(mode="after")
    def check_time_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class CalendarEventCreate(CalendarEventBase):
    """Request body for creating an event"""
    model_config = ConfigDict(extra="forbid")


class NewCalendarEvent(CalendarEventBase):
    """Row about to be inserted - a create payload bound to its owner"""
    user_id: UUID
    parent_event_id: Optional[UUID] = None

    def to_row(self) -> Dict[str, Any]:
        """JSON-ready dict for the store"""
        return self.model_dump(mode="json")


class CalendarEvent(BaseModel):
    """Full event model as persisted"""
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    color: str
    notes: Optional[str] = None
    start_time: datetime
    end_time: datetime
    recurrence: Recurrence = Recurrence.NONE
    category: Optional[str] = None
    parent_event_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CalendarEventPatch(BaseModel):
    """Partial update - only the mutable fields, unknown keys rejected"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    notes: Optional[str] = None
    start_time: Optional[AwareDatetime] = None
    end_time: Optional[AwareDatetime] = None
    recurrence: Optional[Recurrence] = None
    category: Optional[str] = Field(default=None, max_length=MAX_CATEGORY_LENGTH)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; null is not a value
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    @model_validator(mode="after")
    def check_time_order(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually supplied, JSON-ready"""
        return self.model_dump(mode="json", exclude_unset=True, exclude={"id"})

    @property
    def touches_times(self) -> bool:
        return self.start_time is not None or self.end_time is not None


class EventFilter(BaseModel):
    """Query parameters for listing events"""
    start_date: Optional[AwareDatetime] = None
    end_date: Optional[AwareDatetime] = None
    search: Optional[str] = None
    categories: Optional[str] = None  # Comma-separated list

    @property
    def category_list(self) -> List[str]:
        if not self.categories:
            return []
        return [c.strip() for c in self.categories.split(",") if c.strip()]


# === CONFLICTS ===

class EventConflict(BaseModel):
    """An existing event overlapping a candidate interval"""
    event: CalendarEvent
    overlap_type: OverlapKind


# === OPERATION RESULTS ===

class CreateEventResult(BaseModel):
    event: CalendarEvent
    recurring_events_created: int = 0
    conflicts: List[EventConflict] = Field(default_factory=list)


class UpdateEventResult(BaseModel):
    event: CalendarEvent
    conflicts: List[EventConflict] = Field(default_factory=list)


class DeleteResult(BaseModel):
    deleted_count: int
    series: bool = False


class EventStats(BaseModel):
    """Per-owner counters, shaped like the calendar_event_stats view"""
    total_events: int = 0
    upcoming_events: int = 0
    past_events: int = 0
    active_days: int = 0
    first_event: Optional[datetime] = None
    last_event: Optional[datetime] = None


# === BATCH ===

class BatchEventUpdate(CalendarEventPatch):
    """Patch addressed to a specific event inside a batch"""
    id: UUID


class BatchEventRef(BaseModel):
    """Delete target - extra event fields are tolerated and ignored"""
    id: UUID


class BatchOperation(BaseModel):
    type: BatchOperationType
    events: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp: Optional[AwareDatetime] = None


class BatchRequest(BaseModel):
    operations: List[BatchOperation]


class BatchOperationResult(BaseModel):
    type: BatchOperationType
    success: bool
    processed: int = 0
    result: List[CalendarEvent] = Field(default_factory=list)
    error: Optional[str] = None


class BatchResult(BaseModel):
    results: List[BatchOperationResult] = Field(default_factory=list)

    @property
    def failed_operations(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def total_events_processed(self) -> int:
        return sum(r.processed for r in self.results)

    @property
    def events(self) -> List[CalendarEvent]:
        return [e for r in self.results if r.success for e in r.result]

    def summary(self) -> Dict[str, int]:
        return {
            "total_operations": len(self.results),
            "successful_operations": len(self.results) - self.failed_operations,
            "failed_operations": self.failed_operations,
            "total_events_processed": self.total_events_processed,
        }


class ConflictQuery(BaseModel):
    """Query parameters for an explicit conflict check"""
    start_time: AwareDatetime
    end_time: AwareDatetime
    exclude_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_time_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self
