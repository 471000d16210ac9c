"""
Supabase implementation of the calendar event repository.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from core.domain.constants import CALENDAR_EVENTS_TABLE
from core.domain.errors import StoreError
from core.domain.models import CalendarEvent, EventFilter, NewCalendarEvent, Recurrence
from core.interfaces.repositories import ICalendarEventRepository
from infrastructure.database.supabase_client import run_sync

logger = logging.getLogger(__name__)

# Characters with meaning inside a PostgREST or=(...) filter
_FILTER_RESERVED = str.maketrans({",": " ", "(": " ", ")": " "})


class SupabaseCalendarEventRepository(ICalendarEventRepository):
    """Supabase implementation of calendar event repository"""

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(CALENDAR_EVENTS_TABLE)

    def _to_model(self, data: dict) -> CalendarEvent:
        """Convert database row to CalendarEvent model"""
        return CalendarEvent(
            id=data["id"],
            user_id=data["user_id"],
            title=data["title"],
            description=data.get("description"),
            color=data["color"],
            notes=data.get("notes"),
            start_time=data["start_time"],
            end_time=data["end_time"],
            recurrence=Recurrence(data.get("recurrence") or "none"),
            category=data.get("category"),
            parent_event_id=data.get("parent_event_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except APIError as e:
            logger.error(f"[EVENT_REPO] Failed to {action}: {e.message}")
            raise StoreError(f"Failed to {action}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.error(f"[EVENT_REPO] Failed to {action}: {type(e).__name__}: {e}")
            raise StoreError(f"Failed to {action}: {e}") from e

    # --- READ ---

    @run_sync
    def _get_by_id_sync(self, event_id: UUID, owner_id: UUID) -> Optional[dict]:
        query = self._table().select("*")\
            .eq("id", str(event_id))\
            .eq("user_id", str(owner_id))
        response = self._execute(query, "fetch event")
        return response.data[0] if response.data else None

    async def get_by_id(self, event_id: UUID, owner_id: UUID) -> Optional[CalendarEvent]:
        data = await self._get_by_id_sync(event_id, owner_id)
        return self._to_model(data) if data else None

    @run_sync
    def _list_events_sync(self, owner_id: UUID, filters: EventFilter) -> List[dict]:
        query = self._table().select("*").eq("user_id", str(owner_id))

        if filters.start_date:
            query = query.gte("start_time", filters.start_date.isoformat())
        if filters.end_date:
            query = query.lte("start_time", filters.end_date.isoformat())
        if filters.search:
            term = filters.search.translate(_FILTER_RESERVED).strip()
            if term:
                query = query.or_(
                    f"title.ilike.%{term}%,description.ilike.%{term}%,notes.ilike.%{term}%"
                )
        if filters.category_list:
            query = query.in_("category", filters.category_list)

        response = self._execute(query.order("start_time"), "fetch events")
        return response.data if response.data else []

    async def list_events(self, owner_id: UUID, filters: EventFilter) -> List[CalendarEvent]:
        data = await self._list_events_sync(owner_id, filters)
        return [self._to_model(d) for d in data]

    @run_sync
    def _list_overlapping_sync(
        self,
        owner_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[UUID],
    ) -> List[dict]:
        query = self._table().select("*")\
            .eq("user_id", str(owner_id))\
            .lt("start_time", end_time.isoformat())\
            .gt("end_time", start_time.isoformat())
        if exclude_id:
            query = query.neq("id", str(exclude_id))
        response = self._execute(query.order("start_time"), "check for conflicts")
        return response.data if response.data else []

    async def list_overlapping(
        self,
        owner_id: UUID,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[UUID] = None,
    ) -> List[CalendarEvent]:
        data = await self._list_overlapping_sync(owner_id, start_time, end_time, exclude_id)
        return [self._to_model(d) for d in data]

    # --- CREATE ---

    @run_sync
    def _create_sync(self, row: dict) -> dict:
        response = self._execute(self._table().insert(row), "create event")
        return response.data[0]

    async def create(self, event: NewCalendarEvent) -> CalendarEvent:
        data = await self._create_sync(event.to_row())
        return self._to_model(data)

    @run_sync
    def _create_many_sync(self, rows: List[dict]) -> List[dict]:
        response = self._execute(self._table().insert(rows), "create events")
        return response.data if response.data else []

    async def create_many(self, events: List[NewCalendarEvent]) -> List[CalendarEvent]:
        if not events:
            return []
        data = await self._create_many_sync([e.to_row() for e in events])
        logger.info(f"[EVENT_REPO] Inserted {len(data)}/{len(events)} events")
        return [self._to_model(d) for d in data]

    # --- UPDATE ---

    @run_sync
    def _update_sync(self, event_id: UUID, owner_id: UUID, changes: Dict[str, Any]) -> Optional[dict]:
        payload = dict(changes, updated_at=datetime.now(timezone.utc).isoformat())
        query = self._table().update(payload)\
            .eq("id", str(event_id))\
            .eq("user_id", str(owner_id))
        response = self._execute(query, "update event")
        return response.data[0] if response.data else None

    async def update(self, event_id: UUID, owner_id: UUID, changes: Dict[str, Any]) -> Optional[CalendarEvent]:
        data = await self._update_sync(event_id, owner_id, changes)
        return self._to_model(data) if data else None

    # --- DELETE ---

    @run_sync
    def _delete_sync(self, event_id: UUID, owner_id: UUID) -> List[dict]:
        query = self._table().delete()\
            .eq("id", str(event_id))\
            .eq("user_id", str(owner_id))
        response = self._execute(query, "delete event")
        return response.data if response.data else []

    async def delete(self, event_id: UUID, owner_id: UUID) -> int:
        return len(await self._delete_sync(event_id, owner_id))

    @run_sync
    def _delete_series_sync(self, root_id: UUID, owner_id: UUID) -> List[dict]:
        query = self._table().delete()\
            .or_(f"id.eq.{root_id},parent_event_id.eq.{root_id}")\
            .eq("user_id", str(owner_id))
        response = self._execute(query, "delete recurring series")
        return response.data if response.data else []

    async def delete_series(self, root_id: UUID, owner_id: UUID) -> int:
        return len(await self._delete_series_sync(root_id, owner_id))

    @run_sync
    def _delete_many_sync(self, event_ids: List[UUID], owner_id: UUID) -> List[dict]:
        query = self._table().delete()\
            .in_("id", [str(i) for i in event_ids])\
            .eq("user_id", str(owner_id))
        response = self._execute(query, "delete events")
        return response.data if response.data else []

    async def delete_many(self, event_ids: List[UUID], owner_id: UUID) -> List[CalendarEvent]:
        if not event_ids:
            return []
        data = await self._delete_many_sync(event_ids, owner_id)
        return [self._to_model(d) for d in data]
