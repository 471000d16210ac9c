"""
Calendar REST API - aiohttp app exposing the calendar service.

All /api routes need `Authorization: Bearer <token>`; responses use the
envelope {"success": bool, "data": ..., "message" | "error": ...}.
"""

import logging
from typing import List, Optional
from uuid import UUID

from aiohttp import web

from adapters.api.middleware import auth_middleware, cors_middleware, error_middleware
from core.domain.errors import ValidationError
from core.domain.models import EventConflict
from core.interfaces.auth import IAuthProvider
from core.services.calendar_service import CalendarService

logger = logging.getLogger(__name__)


def _conflicts_payload(conflicts: List[EventConflict]) -> Optional[dict]:
    if not conflicts:
        return None
    return {
        "count": len(conflicts),
        "events": [_conflict_to_dict(c) for c in conflicts],
    }


def _conflict_to_dict(conflict: EventConflict) -> dict:
    return {
        "id": str(conflict.event.id),
        "title": conflict.event.title,
        "start_time": conflict.event.start_time.isoformat(),
        "end_time": conflict.event.end_time.isoformat(),
        "overlap_type": conflict.overlap_type.value,
    }


async def _read_json(request: web.Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON") from None
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _event_id(request: web.Request) -> UUID:
    try:
        return UUID(request.match_info["event_id"])
    except ValueError:
        raise ValidationError("Event ID must be a valid UUID") from None


def create_api_app(
    calendar_service: CalendarService,
    auth_provider: IAuthProvider,
    allowed_origin: str = "*",
) -> web.Application:
    """Create aiohttp app with the calendar event routes."""

    async def handle_health(request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def handle_list_events(request: web.Request) -> web.Response:
        events = await calendar_service.list_events(request["user_id"], dict(request.query))
        return web.json_response({
            "success": True,
            "data": [e.model_dump(mode="json") for e in events],
            "message": f"Found {len(events)} events",
        })

    async def handle_create_event(request: web.Request) -> web.Response:
        result = await calendar_service.create_event(request["user_id"], await _read_json(request))
        return web.json_response({
            "success": True,
            "data": result.event.model_dump(mode="json"),
            "message": "Event created successfully",
            "recurring_events_created": result.recurring_events_created,
            "conflicts": _conflicts_payload(result.conflicts),
        }, status=201)

    async def handle_update_event(request: web.Request) -> web.Response:
        event_id = _event_id(request)
        result = await calendar_service.update_event(request["user_id"], event_id, await _read_json(request))
        return web.json_response({
            "success": True,
            "data": result.event.model_dump(mode="json"),
            "message": "Event updated successfully",
            "conflicts": _conflicts_payload(result.conflicts),
        })

    async def handle_delete_event(request: web.Request) -> web.Response:
        event_id = _event_id(request)
        series = request.query.get("delete_recurring", "").lower() == "true"
        result = await calendar_service.delete_event(request["user_id"], event_id, series=series)

        if result.series and result.deleted_count > 1:
            message = f"Deleted {result.deleted_count} events from recurring series"
        else:
            message = "Event deleted successfully"
        return web.json_response({
            "success": True,
            "message": message,
            "deleted_count": result.deleted_count,
        })

    async def handle_batch(request: web.Request) -> web.Response:
        result = await calendar_service.process_batch(request["user_id"], await _read_json(request))
        return web.json_response({
            "success": result.failed_operations == 0,
            "data": [e.model_dump(mode="json") for e in result.events],
            "message": f"Batch processing completed. {result.total_events_processed} events processed.",
            "summary": result.summary(),
            "details": [r.model_dump(mode="json") for r in result.results],
        })

    async def handle_conflicts(request: web.Request) -> web.Response:
        conflicts = await calendar_service.check_conflicts(request["user_id"], dict(request.query))
        return web.json_response({
            "success": True,
            "data": [_conflict_to_dict(c) for c in conflicts],
            "message": f"Found {len(conflicts)} conflicting events",
        })

    async def handle_stats(request: web.Request) -> web.Response:
        stats = await calendar_service.get_stats(request["user_id"])
        return web.json_response({"success": True, "data": stats.model_dump(mode="json")})

    app = web.Application(middlewares=[
        cors_middleware(allowed_origin),
        error_middleware,
        auth_middleware(auth_provider),
    ])
    app.router.add_get("/health", handle_health)
    app.router.add_get("/api/events", handle_list_events)
    app.router.add_post("/api/events", handle_create_event)
    app.router.add_post("/api/events/batch", handle_batch)
    app.router.add_get("/api/events/conflicts", handle_conflicts)
    app.router.add_get("/api/events/stats", handle_stats)
    app.router.add_put("/api/events/{event_id}", handle_update_event)
    app.router.add_delete("/api/events/{event_id}", handle_delete_event)
    return app
