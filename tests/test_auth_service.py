"""Unit tests for the auth state machine with an in-memory credential store."""

import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from jokes_api.jwt.blocklist import InMemoryRevocationRegistry, RevocationRegistry
from jokes_api.jwt.tokens import TokenIssuer
from jokes_api.services.auth_service import AuthService
from jokes_api.utils.exceptions import (
    AuthenticationError, ConflictError, ServiceError, UnauthorizedError, ValidationError
)

from conftest import ACCESS_SECRET, ISSUER, REFRESH_SECRET


class FakeCredentials:
    def __init__(self):
        self.users = {}

    async def username_exists(self, username):
        return username in self.users

    async def find_user(self, username):
        return self.users.get(username)

    async def create_user(self, username, password):
        user = SimpleNamespace(
            id=str(uuid.uuid4()), username=username, password_hash=f"hashed:{password}"
        )
        self.users[username] = user
        return user

    async def verify_password(self, password, password_hash):
        return password_hash == f"hashed:{password}"


class BrokenRegistry(RevocationRegistry):
    async def clear(self, user_id):
        raise ServiceError("down")

    async def blacklist(self, user_id, refresh_token, ttl_seconds):
        raise ServiceError("down")

    async def is_blacklisted(self, user_id):
        raise ServiceError("down")


@pytest.fixture
def issuer():
    return TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, ISSUER)


@pytest.fixture
def service(issuer):
    return AuthService(FakeCredentials(), issuer, InMemoryRevocationRegistry())


@pytest.mark.asyncio
async def test_register_then_login_tokens_carry_user_id(service, issuer):
    user = await service.register("alice", "pw1")
    tokens = await service.login("alice", "pw1")
    assert issuer.verify_access_token(tokens.access_token).sub == user.id
    assert issuer.verify_refresh_token(tokens.refresh_token).sub == user.id


@pytest.mark.asyncio
@pytest.mark.parametrize("username, password", [(None, "pw"), ("alice", None), ("", "pw"), ("alice", "")])
async def test_missing_fields_rejected(service, username, password):
    with pytest.raises(ValidationError):
        await service.register(username, password)
    with pytest.raises(ValidationError):
        await service.login(username, password)


@pytest.mark.asyncio
async def test_duplicate_username_conflicts_case_sensitively(service):
    await service.register("alice", "pw1")
    with pytest.raises(ConflictError):
        await service.register("alice", "pw2")
    # 대소문자가 다르면 다른 사용자
    await service.register("Alice", "pw2")


@pytest.mark.asyncio
async def test_wrong_password_issues_nothing(issuer):
    spy = MagicMock(wraps=issuer)
    service = AuthService(FakeCredentials(), spy, InMemoryRevocationRegistry())
    await service.register("alice", "pw1")

    with pytest.raises(AuthenticationError) as wrong_pw:
        await service.login("alice", "wrong")
    with pytest.raises(AuthenticationError) as unknown:
        await service.login("bob", "pw1")

    assert wrong_pw.value.message == unknown.value.message
    spy.issue_access_token.assert_not_called()
    spy.issue_refresh_token.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_echoes_refresh_token_with_new_access_token(service):
    await service.register("alice", "pw1")
    tokens = await service.login("alice", "pw1")

    first = await service.refresh(tokens.refresh_token)
    second = await service.refresh(tokens.refresh_token)
    assert first.refresh_token == tokens.refresh_token
    assert second.refresh_token == tokens.refresh_token
    assert first.access_token != second.access_token


@pytest.mark.asyncio
async def test_refresh_requires_token(service):
    with pytest.raises(UnauthorizedError):
        await service.refresh(None)
    with pytest.raises(UnauthorizedError):
        await service.logout("")


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(service):
    await service.register("alice", "pw1")
    tokens = await service.login("alice", "pw1")
    with pytest.raises(AuthenticationError):
        await service.refresh(tokens.access_token)
    with pytest.raises(AuthenticationError):
        await service.logout(tokens.access_token)


@pytest.mark.asyncio
async def test_logout_blocks_every_refresh_token_of_user(service):
    await service.register("alice", "pw1")
    first = await service.login("alice", "pw1")
    second = await service.login("alice", "pw1")

    await service.logout(first.refresh_token)

    with pytest.raises(AuthenticationError):
        await service.refresh(first.refresh_token)
    with pytest.raises(AuthenticationError):
        await service.refresh(second.refresh_token)


@pytest.mark.asyncio
async def test_login_clears_blacklist(service):
    await service.register("alice", "pw1")
    old = await service.login("alice", "pw1")
    await service.logout(old.refresh_token)

    fresh = await service.login("alice", "pw1")
    refreshed = await service.refresh(fresh.refresh_token)
    assert refreshed.refresh_token == fresh.refresh_token


@pytest.mark.asyncio
async def test_logout_uses_refresh_lifetime_ttl(issuer):
    registry = InMemoryRevocationRegistry()
    service = AuthService(FakeCredentials(), issuer, registry, blacklist_ttl_seconds=31536000)
    user = await service.register("alice", "pw1")
    tokens = await service.login("alice", "pw1")
    await service.logout(tokens.refresh_token)

    token, expires_at = registry._entries[user.id]
    assert token == tokens.refresh_token
    assert expires_at > 31535000


@pytest.mark.asyncio
async def test_registry_failure_fails_closed(issuer):
    healthy = AuthService(FakeCredentials(), issuer, InMemoryRevocationRegistry())
    await healthy.register("alice", "pw1")
    tokens = await healthy.login("alice", "pw1")

    broken = AuthService(healthy.credentials, issuer, BrokenRegistry())
    with pytest.raises(ServiceError):
        await broken.refresh(tokens.refresh_token)
    with pytest.raises(ServiceError):
        await broken.logout(tokens.refresh_token)
