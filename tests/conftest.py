"""
Shared fixtures: an in-memory event store, a fake auth provider and an API client.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from adapters.api import create_api_app
from core.domain.errors import AuthenticationError, StoreError
from core.domain.models import CalendarEvent, EventFilter, NewCalendarEvent, Recurrence
from core.interfaces.auth import IAuthProvider
from core.interfaces.repositories import ICalendarEventRepository
from core.services import CalendarService


def at(value: str) -> datetime:
    """'2025-01-01T10:00' -> aware UTC datetime"""
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class InMemoryCalendarEventRepository(ICalendarEventRepository):
    """Dict-backed store with the same owner scoping as the Supabase repository"""

    def __init__(self):
        self.rows: Dict[UUID, CalendarEvent] = {}
        self.fail_create_many = False
        self.fail_overlap_lookup = False
        self.create_many_calls = 0

    def add(self, owner_id: UUID, start: str, end: str, **fields) -> CalendarEvent:
        fields.setdefault("title", "Training")
        fields.setdefault("color", "#4CAF50")
        return self._insert(NewCalendarEvent(user_id=owner_id, start_time=at(start), end_time=at(end), **fields))

    def _insert(self, new: NewCalendarEvent) -> CalendarEvent:
        now = datetime.now(timezone.utc)
        event = CalendarEvent(id=uuid4(), created_at=now, updated_at=now, **new.model_dump())
        self.rows[event.id] = event
        return event

    def _owned(self, owner_id: UUID) -> List[CalendarEvent]:
        return [e for e in self.rows.values() if e.user_id == owner_id]

    async def get_by_id(self, event_id: UUID, owner_id: UUID) -> Optional[CalendarEvent]:
        event = self.rows.get(event_id)
        return event if event and event.user_id == owner_id else None

    async def list_events(self, owner_id: UUID, filters: EventFilter) -> List[CalendarEvent]:
        events = self._owned(owner_id)
        if filters.start_date:
            events = [e for e in events if e.start_time >= filters.start_date]
        if filters.end_date:
            events = [e for e in events if e.start_time <= filters.end_date]
        if filters.search:
            term = filters.search.lower()
            events = [
                e for e in events
                if any(term in (text or "").lower() for text in (e.title, e.description, e.notes))
            ]
        if filters.category_list:
            events = [e for e in events if e.category in filters.category_list]
        return sorted(events, key=lambda e: e.start_time)

    async def list_overlapping(self, owner_id, start_time, end_time, exclude_id=None):
        if self.fail_overlap_lookup:
            raise StoreError("Failed to check for conflicts: connection reset")
        events = [
            e for e in self._owned(owner_id)
            if e.start_time < end_time and e.end_time > start_time and e.id != exclude_id
        ]
        return sorted(events, key=lambda e: e.start_time)

    async def create(self, event: NewCalendarEvent) -> CalendarEvent:
        return self._insert(event)

    async def create_many(self, events: List[NewCalendarEvent]) -> List[CalendarEvent]:
        self.create_many_calls += 1
        if self.fail_create_many:
            raise StoreError("Failed to create events: connection reset")
        return [self._insert(e) for e in events]

    async def update(self, event_id, owner_id, changes):
        existing = await self.get_by_id(event_id, owner_id)
        if not existing:
            return None
        data = existing.model_dump()
        data.update(changes)
        data["updated_at"] = datetime.now(timezone.utc)
        event = CalendarEvent.model_validate(data)
        self.rows[event_id] = event
        return event

    async def delete(self, event_id: UUID, owner_id: UUID) -> int:
        if not await self.get_by_id(event_id, owner_id):
            return 0
        del self.rows[event_id]
        # parent_event_id is ON DELETE CASCADE; the store reports only the targeted row
        for child_id in [e.id for e in self.rows.values() if e.parent_event_id == event_id]:
            del self.rows[child_id]
        return 1

    async def delete_series(self, root_id: UUID, owner_id: UUID) -> int:
        doomed = [e.id for e in self._owned(owner_id) if e.id == root_id or e.parent_event_id == root_id]
        for event_id in doomed:
            del self.rows[event_id]
        return len(doomed)

    async def delete_many(self, event_ids: List[UUID], owner_id: UUID) -> List[CalendarEvent]:
        removed = [e for e in self._owned(owner_id) if e.id in set(event_ids)]
        for event in removed:
            del self.rows[event.id]
        return removed


class FakeAuthProvider(IAuthProvider):
    def __init__(self, tokens: Dict[str, UUID]):
        self.tokens = tokens

    async def get_user_id(self, token: str) -> UUID:
        if token not in self.tokens:
            raise AuthenticationError("Invalid or expired token")
        return self.tokens[token]


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def other_owner_id():
    return uuid4()


@pytest.fixture
def repo():
    return InMemoryCalendarEventRepository()


@pytest.fixture
def service(repo):
    return CalendarService(repo)


@pytest.fixture
def event_payload():
    return {
        "title": "Regional Open",
        "description": "Pool play day one",
        "color": "#1E88E5",
        "start_time": "2025-01-01T10:00:00Z",
        "end_time": "2025-01-01T11:00:00Z",
    }


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer good-token"}


@pytest_asyncio.fixture
async def api_client(service, owner_id):
    app = create_api_app(service, FakeAuthProvider({"good-token": owner_id}), allowed_origin="https://app.example.com")
    async with TestClient(TestServer(app)) as client:
        yield client
