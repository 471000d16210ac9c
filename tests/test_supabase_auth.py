"""Tests for bearer-token verification through Supabase Auth."""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from core.domain.errors import AuthenticationError
from infrastructure.auth import SupabaseAuthProvider


class FakeAuth:
    def __init__(self, users=None, error=None):
        self.users = users or {}
        self.error = error

    def get_user(self, token):
        if self.error:
            raise self.error
        user = self.users.get(token)
        return SimpleNamespace(user=SimpleNamespace(id=user) if user else None)


def provider(**kwargs):
    return SupabaseAuthProvider(SimpleNamespace(auth=FakeAuth(**kwargs)))


@pytest.mark.asyncio
async def test_valid_token_resolves_owner():
    user_id = uuid4()
    assert await provider(users={"t1": str(user_id)}).get_user_id("t1") == user_id


@pytest.mark.asyncio
async def test_unknown_token():
    with pytest.raises(AuthenticationError):
        await provider().get_user_id("nope")


@pytest.mark.asyncio
async def test_provider_failure_is_authentication_error():
    with pytest.raises(AuthenticationError, match="Invalid or expired token"):
        await provider(error=RuntimeError("JWT expired")).get_user_id("t1")
