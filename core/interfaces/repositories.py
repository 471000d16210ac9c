"""
Repository interfaces - abstractions for data access.
This allows swapping implementations (Supabase -> PostgreSQL -> in-memory, etc.)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List, Dict, Any
from uuid import UUID
from core.domain.models import CalendarEvent, EventFilter, NewCalendarEvent


class ICalendarEventRepository(ABC):
    """Interface for calendar event data access. Every call is scoped to one owner."""

    @abstractmethod
    async def get_by_id(self, event_id: UUID, owner_id: UUID) -> Optional[CalendarEvent]:
        """Get an event if it exists and belongs to the owner"""
        pass

    @abstractmethod
    async def list_events(self, owner_id: UUID, filters: EventFilter) -> List[CalendarEvent]:
        """List the owner's events matching the filter, ordered by start time"""
        pass

    @abstractmethod
    async def list_overlapping(
        self,
        owner_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[UUID] = None,
    ) -> List[CalendarEvent]:
        """Get the owner's events intersecting [start_time, end_time)"""
        pass

    @abstractmethod
    async def create(self, event: NewCalendarEvent) -> CalendarEvent:
        """Insert one event"""
        pass

    @abstractmethod
    async def create_many(self, events: List[NewCalendarEvent]) -> List[CalendarEvent]:
        """Insert several events in one store call"""
        pass

    @abstractmethod
    async def update(self, event_id: UUID, owner_id: UUID, changes: Dict[str, Any]) -> Optional[CalendarEvent]:
        """Apply field changes; None if nothing matched"""
        pass

    @abstractmethod
    async def delete(self, event_id: UUID, owner_id: UUID) -> int:
        """Delete one event, returns rows removed"""
        pass

    @abstractmethod
    async def delete_series(self, root_id: UUID, owner_id: UUID) -> int:
        """Delete the root event and every event whose parent is the root"""
        pass

    @abstractmethod
    async def delete_many(self, event_ids: List[UUID], owner_id: UUID) -> List[CalendarEvent]:
        """Delete several events, returns the removed rows"""
        pass
