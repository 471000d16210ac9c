"""
Supabase Auth token verification.
"""

import logging
from typing import Optional
from uuid import UUID

from supabase import Client

from core.domain.errors import AuthenticationError
from core.interfaces.auth import IAuthProvider
from infrastructure.database.supabase_client import run_sync

logger = logging.getLogger(__name__)


class SupabaseAuthProvider(IAuthProvider):
    """Verifies access tokens against Supabase Auth"""

    def __init__(self, client: Client):
        self._client = client

    @run_sync
    def _get_user_sync(self, token: str) -> Optional[str]:
        response = self._client.auth.get_user(token)
        user = response.user if response else None
        return user.id if user else None

    async def get_user_id(self, token: str) -> UUID:
        try:
            user_id = await self._get_user_sync(token)
        except Exception as e:
            logger.warning(f"[AUTH] Token verification failed: {e}")
            raise AuthenticationError("Invalid or expired token") from e
        if not user_id:
            raise AuthenticationError("Invalid or expired token")
        return UUID(str(user_id))
