"""
Shelf Auth - Credential & Session Authentication

Hexagonal architecture for password login, refresh-token sessions and
request authentication shared by the REST and GraphQL surfaces.

Usage:
    from shelf_auth import AuthClient, AuthSettings
    from shelf_auth.adapters import RedisTokenStore
    from shelf_auth.ports import CallContext

    client = AuthClient.from_settings(
        AuthSettings(),
        token_store=RedisTokenStore(url="redis://localhost"),
    )

    # Login
    result = client.login(email, password)

    # Authenticate a call (HTTP request or GraphQL context)
    user = client.authenticate(CallContext.http(request))

    # Rotate the refresh token
    result = client.refresh(result.refresh_token)
"""

__version__ = "0.1.0"

from shelf_auth.config import AuthSettings
from shelf_auth.sdk.client import AuthClient, AuthResult
from shelf_auth.domain.user import User, UserRole
from shelf_auth.domain.refresh_token import RefreshToken, TokenStatus
from shelf_auth.errors import (
    AuthError,
    DuplicateCredentialError,
    InvalidCredentialError,
    InvalidEmailError,
    NotFoundError,
    UnauthenticatedError,
    WeakCredentialError,
)

__all__ = [
    "AuthClient",
    "AuthResult",
    "AuthSettings",
    "User",
    "UserRole",
    "RefreshToken",
    "TokenStatus",
    "AuthError",
    "DuplicateCredentialError",
    "InvalidCredentialError",
    "InvalidEmailError",
    "NotFoundError",
    "UnauthenticatedError",
    "WeakCredentialError",
]
