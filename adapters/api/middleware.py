"""
Middleware for the HTTP API.

- cors_middleware: CORS headers on every response, answers preflight
- error_middleware: maps domain errors to the JSON error envelope
- auth_middleware: resolves the bearer token to the owner id
"""

import logging
from typing import Awaitable, Callable

from aiohttp import web

from core.domain.errors import AuthenticationError, CalendarError
from core.interfaces.auth import IAuthProvider

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"


def cors_middleware(allowed_origin: str = "*"):
    """Build a middleware adding CORS headers for `allowed_origin`."""

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.method == "OPTIONS":
            response = web.Response(status=200)
        else:
            response = await handler(request)
        response.headers["Access-Control-Allow-Origin"] = allowed_origin
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        response.headers["Access-Control-Allow-Credentials"] = "true"
        return response

    return middleware


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except CalendarError as e:
        body = {"success": False, "error": e.message, "code": e.code}
        if e.details:
            body["details"] = e.details
        if e.status_code >= 500:
            logger.error(f"[API] {request.method} {request.path} failed: {e.message}")
        return web.json_response(body, status=e.status_code)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        body = {"success": False, "error": e.reason}
        if e.status == 404:
            body["message"] = f"Route {request.method} {request.path} not found"
        return web.json_response(body, status=e.status)
    except Exception as e:
        logger.error(f"[API] Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        return web.json_response({"success": False, "error": "Internal server error"}, status=500)


def auth_middleware(auth_provider: IAuthProvider, protected_prefix: str = "/api"):
    """Require `Authorization: Bearer <token>` on every route under `protected_prefix`."""

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if not request.path.startswith(protected_prefix):
            return await handler(request)

        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer ") or not header[7:].strip():
            raise AuthenticationError("Missing or invalid authorization header")

        request["user_id"] = await auth_provider.get_user_id(header[7:].strip())
        return await handler(request)

    return middleware
