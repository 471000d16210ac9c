"""
REST API adapter - aiohttp application for the calendar service.

Serves:
- Event listing, creation, update and deletion (single or whole series)
- Batch create/update/delete for offline clients
- Advisory conflict checks and per-user statistics
"""

from adapters.api.app import create_api_app

__all__ = [
    "create_api_app",
]
