"""
Calendar Events API - Main entry point.

REST service for tournament calendar events backed by Supabase.
"""

import asyncio
import logging
import sys
from aiohttp import web
from adapters.api import create_api_app
from config.features import features
from config.settings import settings
from core.services import CalendarService
from infrastructure.auth import SupabaseAuthProvider
from infrastructure.database import SupabaseCalendarEventRepository, create_supabase_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(features.LOG_FILE, encoding="utf-8"),
    ],
)
logger = logging.getLogger(__name__)

# Set DEBUG level only for our app loggers, not for noisy libraries
if features.DEBUG_MODE or settings.debug:
    for name in ['adapters', 'core', 'infrastructure', '__main__']:
        logging.getLogger(name).setLevel(logging.DEBUG)
    # Silence noisy HTTP debug logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('hpack').setLevel(logging.WARNING)


def build_app() -> web.Application:
    """Wire the Supabase client, repositories and services into the aiohttp app."""
    url, key = settings.supabase_credentials()
    client = create_supabase_client(url, key, schema=settings.db_schema)

    calendar_service = CalendarService(
        SupabaseCalendarEventRepository(client),
        conflict_check_enabled=features.CONFLICT_CHECK_ENABLED,
        recurrence_enabled=features.RECURRENCE_ENABLED,
    )
    return create_api_app(
        calendar_service,
        SupabaseAuthProvider(client),
        allowed_origin=settings.allowed_origin,
    )


async def main():
    """Main function - starts the API server and serves until cancelled."""

    logger.info("=== Calendar Events API Starting ===")
    logger.info("Feature Flags:")
    for key, value in features.to_dict().items():
        logger.info(f"  {key}: {value}")

    try:
        app = build_app()
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.host, settings.port)
    await site.start()
    logger.info(f"Calendar API listening on {settings.host}:{settings.port} (env={settings.env})")

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        logger.info("Server stopped.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user (Ctrl+C)")
    except SystemExit as e:
        sys.exit(e.code)
