"""
Calendar service - business logic for calendar event operations.
Platform-agnostic, works through the repository interface.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.domain.errors import CalendarError, NotFoundError, StoreError, ValidationError
from core.domain.models import (
    BatchEventRef,
    BatchEventUpdate,
    BatchOperationResult,
    BatchOperationType,
    BatchRequest,
    BatchResult,
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventPatch,
    ConflictQuery,
    CreateEventResult,
    DeleteResult,
    EventConflict,
    EventFilter,
    EventStats,
    NewCalendarEvent,
    Recurrence,
    UpdateEventResult,
)
from core.interfaces.repositories import ICalendarEventRepository
from core.services.conflicts import ConflictDetector
from core.services.recurrence import RecurrenceExpander

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_details(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """JSON-safe subset of pydantic's error list"""
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def validate_payload(model: Type[ModelT], data: Any, message: str = "Invalid event data") -> ModelT:
    """Parse raw input into a schema model, raising the domain ValidationError"""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(message, details=_error_details(e)) from e


class CalendarService:
    """Service for calendar event operations"""

    def __init__(
        self,
        event_repo: ICalendarEventRepository,
        expander: Optional[RecurrenceExpander] = None,
        detector: Optional[ConflictDetector] = None,
        conflict_check_enabled: bool = True,
        recurrence_enabled: bool = True,
    ):
        self.event_repo = event_repo
        self.expander = expander or RecurrenceExpander()
        self.detector = detector or ConflictDetector()
        self.conflict_check_enabled = conflict_check_enabled
        self.recurrence_enabled = recurrence_enabled

    # === QUERIES ===

    async def list_events(self, owner_id: UUID, filters: Any = None) -> List[CalendarEvent]:
        """List owner's events ordered by start time"""
        filters = validate_payload(EventFilter, filters or {}, "Invalid query parameters")
        events = await self.event_repo.list_events(owner_id, filters)
        logger.info(f"[CALENDAR_SERVICE] Found {len(events)} events for {owner_id}")
        return events

    async def check_conflicts(self, owner_id: UUID, query: Any) -> List[EventConflict]:
        """Report every owned event overlapping the queried interval"""
        query = validate_payload(ConflictQuery, query, "Invalid query parameters")
        others = await self.event_repo.list_overlapping(
            owner_id, query.start_time, query.end_time, exclude_id=query.exclude_id
        )
        others = [e for e in others if e.id != query.exclude_id]
        return list(self.detector.detect(query.start_time, query.end_time, others))

    async def get_stats(self, owner_id: UUID, now: Optional[datetime] = None) -> EventStats:
        """Totals, upcoming/past split and active days for one owner"""
        events = await self.event_repo.list_events(owner_id, EventFilter())
        if not events:
            return EventStats()

        now = now or datetime.now(timezone.utc)
        today_start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        starts = [e.start_time.astimezone(timezone.utc) for e in events]

        upcoming = sum(1 for s in starts if s >= today_start)
        return EventStats(
            total_events=len(events),
            upcoming_events=upcoming,
            past_events=len(events) - upcoming,
            active_days=len({s.date() for s in starts}),
            first_event=min(starts),
            last_event=max(starts),
        )

    # === WRITES ===

    async def create_event(self, owner_id: UUID, data: Any) -> CreateEventResult:
        """
        Create an event, then expand its recurrence into derived instances.

        A failed instance batch does not undo the base event: the result
        reports how many instances were actually stored.
        """
        payload = validate_payload(CalendarEventCreate, data)

        conflicts = await self._advisory_conflicts(owner_id, payload.start_time, payload.end_time)

        event = await self.event_repo.create(NewCalendarEvent(user_id=owner_id, **payload.model_dump()))
        logger.info(f"[CALENDAR_SERVICE] Created event {event.id} ({event.recurrence.value}) for {owner_id}")

        created = 0
        if event.recurrence != Recurrence.NONE and self.recurrence_enabled:
            created = await self._create_instances(event, owner_id)

        return CreateEventResult(event=event, recurring_events_created=created, conflicts=conflicts)

    async def update_event(self, owner_id: UUID, event_id: UUID, data: Any) -> UpdateEventResult:
        """Apply a patch; time changes are re-validated and checked for conflicts"""
        patch = validate_payload(CalendarEventPatch, data)
        changes = patch.changes()
        if not changes:
            raise ValidationError("No fields to update")

        existing = await self.event_repo.get_by_id(event_id, owner_id)
        if not existing:
            raise NotFoundError("Event not found or access denied")

        conflicts = []
        if patch.touches_times:
            start_time = patch.start_time or existing.start_time
            end_time = patch.end_time or existing.end_time
            self._check_interval(start_time, end_time)
            conflicts = await self._advisory_conflicts(owner_id, start_time, end_time, exclude_id=event_id)

        updated = await self.event_repo.update(event_id, owner_id, changes)
        if not updated:
            raise NotFoundError("Event not found or access denied")

        logger.info(f"[CALENDAR_SERVICE] Updated event {event_id}: {sorted(changes)}")
        return UpdateEventResult(event=updated, conflicts=conflicts)

    async def delete_event(self, owner_id: UUID, event_id: UUID, series: bool = False) -> DeleteResult:
        """
        Delete one event, or with `series` the whole series it belongs to.

        The series root is the event's parent if it has one, otherwise the
        event itself; the root and every event pointing at it are removed.
        Deleting a base event always takes its derived instances with it.
        """
        existing = await self.event_repo.get_by_id(event_id, owner_id)
        if not existing:
            raise NotFoundError("Event not found or access denied")

        if series:
            deleted = await self.event_repo.delete_series(existing.parent_event_id or existing.id, owner_id)
        elif existing.parent_event_id is None:
            # Children of a base event go with it (FK cascade); delete them explicitly so they are counted
            deleted = await self.event_repo.delete_series(existing.id, owner_id)
        else:
            deleted = await self.event_repo.delete(event_id, owner_id)

        if deleted == 0:
            raise NotFoundError("Event not found or already deleted")

        logger.info(f"[CALENDAR_SERVICE] Deleted {deleted} event(s) starting from {event_id} (series={series})")
        return DeleteResult(deleted_count=deleted, series=series)

    async def process_batch(self, owner_id: UUID, data: Any) -> BatchResult:
        """
        Run create/update/delete operations in order.

        Every item is validated before anything is written. After that each
        operation succeeds or fails on its own and processing continues.
        """
        request = validate_payload(BatchRequest, data, "Invalid batch request data")
        plan = [
            (op.type, self._parse_batch_items(op.type, op.events, index))
            for index, op in enumerate(request.operations)
        ]

        result = BatchResult()
        for op_type, items in plan:
            try:
                events = await self._run_batch_operation(op_type, items, owner_id)
            except CalendarError as e:
                logger.error(f"[CALENDAR_SERVICE] Batch {op_type.value} failed: {e.message}")
                result.results.append(BatchOperationResult(type=op_type, success=False, error=e.message))
                continue
            result.results.append(BatchOperationResult(
                type=op_type, success=True, result=events, processed=len(events),
            ))

        logger.info(f"[CALENDAR_SERVICE] Batch for {owner_id}: {result.summary()}")
        return result

    # === INTERNALS ===

    @staticmethod
    def _check_interval(start_time: datetime, end_time: datetime) -> None:
        if end_time <= start_time:
            raise ValidationError(
                "End time must be after start time",
                details=[{"loc": ["end_time"], "msg": "End time must be after start time", "type": "value_error"}],
            )

    async def _advisory_conflicts(
        self,
        owner_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[UUID] = None,
    ) -> List[EventConflict]:
        """Conflicts are informational; a failed lookup is logged, not raised"""
        if not self.conflict_check_enabled:
            return []
        try:
            others = await self.event_repo.list_overlapping(owner_id, start_time, end_time, exclude_id=exclude_id)
        except StoreError as e:
            logger.warning(f"[CALENDAR_SERVICE] Failed to check for conflicts: {e.message}")
            return []
        others = [e for e in others if e.id != exclude_id]
        conflicts = list(self.detector.detect(start_time, end_time, others))
        if conflicts:
            logger.info(f"[CALENDAR_SERVICE] {len(conflicts)} conflicting event(s) for {owner_id}")
        return conflicts

    async def _create_instances(self, base: CalendarEvent, owner_id: UUID) -> int:
        instances = self.expander.expand(base, owner_id)
        if not instances:
            return 0
        try:
            created = await self.event_repo.create_many(instances)
        except StoreError as e:
            logger.error(
                f"[CALENDAR_SERVICE] Failed to create recurring events for {base.id}: {e.message}. "
                f"Base event kept, 0/{len(instances)} instances stored"
            )
            return 0
        return len(created)

    def _parse_batch_items(self, op_type: BatchOperationType, items: List[Dict[str, Any]], index: int) -> list:
        message = f"Invalid batch request data: operations[{index}] ({op_type.value})"
        if op_type == BatchOperationType.CREATE:
            # Offline clients may send their local ids; the store assigns real ones
            return [
                validate_payload(CalendarEventCreate, {k: v for k, v in item.items() if k != "id"}, message)
                for item in items
            ]
        if op_type == BatchOperationType.UPDATE:
            return [validate_payload(BatchEventUpdate, item, message) for item in items]
        return [validate_payload(BatchEventRef, item, message) for item in items]

    async def _run_batch_operation(self, op_type: BatchOperationType, items: list, owner_id: UUID) -> List[CalendarEvent]:
        if not items:
            return []

        if op_type == BatchOperationType.CREATE:
            rows = [NewCalendarEvent(user_id=owner_id, **item.model_dump()) for item in items]
            return await self.event_repo.create_many(rows)

        if op_type == BatchOperationType.UPDATE:
            updated = []
            for item in items:
                if item.touches_times and not (item.start_time and item.end_time):
                    existing = await self.event_repo.get_by_id(item.id, owner_id)
                    if not existing:
                        raise NotFoundError(f"Event {item.id} not found")
                    self._check_interval(item.start_time or existing.start_time, item.end_time or existing.end_time)
                changes = item.changes()
                if not changes:
                    continue
                event = await self.event_repo.update(item.id, owner_id, changes)
                if not event:
                    raise NotFoundError(f"Event {item.id} not found")
                updated.append(event)
            return updated

        return await self.event_repo.delete_many([item.id for item in items], owner_id)
