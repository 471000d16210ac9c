"""
Auth interfaces - token verification is delegated to an external identity provider.
"""

from abc import ABC, abstractmethod
from uuid import UUID


class IAuthProvider(ABC):
    """Resolves a bearer token to the id of the user it was issued to"""

    @abstractmethod
    async def get_user_id(self, token: str) -> UUID:
        """Raise AuthenticationError when the token is invalid or expired"""
        pass
