from core.interfaces.repositories import ICalendarEventRepository
from core.interfaces.auth import IAuthProvider

__all__ = [
    # Repositories
    "ICalendarEventRepository",
    # Auth
    "IAuthProvider",
]
