from infrastructure.database.supabase_client import create_supabase_client, run_sync
from infrastructure.database.calendar_event_repository import SupabaseCalendarEventRepository

__all__ = [
    "create_supabase_client",
    "run_sync",
    "SupabaseCalendarEventRepository",
]
