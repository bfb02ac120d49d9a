"""
Shared fixtures: fast bcrypt settings, in-memory adapters, a controllable clock.
"""

import pytest
from collections import namedtuple
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone

from shelf_auth import AuthClient, AuthSettings
from shelf_auth.adapters import JWTAccessTokenAdapter, MemoryTokenStore, MemoryUserDirectory
from shelf_auth.ports.request_port import parse_cookie_header
from shelf_auth.services import CredentialAuthenticator, CredentialHasher, SessionManager

STRONG_PASSWORD = "Str0ng_P@ssw0rd!"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings():
    """Settings with a cheap bcrypt work factor."""
    return AuthSettings(
        jwt_secret="test-secret-key-0123456789abcdef",
        password_pepper="test-pepper",
        token_lookup_secret="test-lookup-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher(settings):
    return CredentialHasher.from_settings(settings)


@pytest.fixture
def users():
    return MemoryUserDirectory()


@pytest.fixture
def token_store(clock):
    return MemoryTokenStore(clock=clock)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def access_tokens(settings):
    return JWTAccessTokenAdapter.from_settings(settings)


@pytest.fixture
def sessions(token_store, settings, hasher, clock):
    return SessionManager(token_store, settings, hasher, clock=clock)


@pytest.fixture
def authenticator(users, hasher, access_tokens, settings):
    return CredentialAuthenticator(users, hasher, access_tokens, settings)


@pytest.fixture
def client(settings, users, token_store):
    return AuthClient.from_settings(settings, users=users, token_store=token_store)


Address = namedtuple("Address", ["host", "port"])


class ScopeRequest(Mapping):
    """
    Request built like Starlette's: a Mapping over the ASGI scope, whose
    "headers" entry is a list of byte pairs, plus headers/cookies/client
    attributes decoded from it.
    """

    def __init__(self, headers=None, client=("10.0.0.1", 50000)):
        self.scope = {
            "type": "http",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "client": client,
        }

    def __getitem__(self, key):
        return self.scope[key]

    def __iter__(self):
        return iter(self.scope)

    def __len__(self):
        return len(self.scope)

    @property
    def headers(self):
        return {name.decode("latin-1"): value.decode("latin-1") for name, value in self.scope["headers"]}

    @property
    def cookies(self):
        return parse_cookie_header(self.headers.get("cookie"))

    @property
    def client(self):
        return Address(*self.scope["client"]) if self.scope["client"] else None

    async def body(self):
        return b""


@pytest.fixture
def scope_request():
    """Factory for Mapping-backed requests."""
    return ScopeRequest
