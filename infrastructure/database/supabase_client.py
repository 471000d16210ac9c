"""
Supabase client construction.
The client is built once at startup and handed to repositories.
"""

import asyncio
import concurrent.futures
import logging
from functools import wraps

from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

logger = logging.getLogger(__name__)


def create_supabase_client(url: str, key: str, schema: str = "public") -> Client:
    """Build a Supabase client; non-public schemas isolate staging data."""
    if not url or not key:
        raise RuntimeError(
            "Supabase credentials not configured. "
            "Required env vars: SUPABASE_URL, SUPABASE_SERVICE_KEY (or SUPABASE_KEY)"
        )

    logger.info(f"Connecting to Supabase (schema={schema})")
    if schema != "public":
        return create_client(url, key, options=ClientOptions(schema=schema))
    return create_client(url, key)


# Dedicated bounded thread pool for DB operations - prevents exhausting the
# default executor when many Supabase calls run concurrently.
_db_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=10,
    thread_name_prefix="supabase-db",
)


def run_sync(func):
    """
    Decorator to run synchronous Supabase operations in async context.
    Supabase Python SDK is synchronous, so we need this wrapper.
    Uses a dedicated bounded thread pool instead of the default executor.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(_db_executor, lambda: func(*args, **kwargs))
    return wrapper
