"""
Auth Client - High-level facade for the HTTP and GraphQL surfaces.

REST controllers and GraphQL resolvers both call into this class; neither
carries authentication logic of its own.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shelf_auth.adapters.jwt_access_token import JWTAccessTokenAdapter
from shelf_auth.adapters.memory_token_store import MemoryTokenStore
from shelf_auth.adapters.memory_user_directory import MemoryUserDirectory
from shelf_auth.adapters.request_context import default_extractors
from shelf_auth.config import AuthSettings
from shelf_auth.domain.user import User
from shelf_auth.errors import NotFoundError, UnauthenticatedError
from shelf_auth.ports.access_token_port import AccessTokenPort
from shelf_auth.ports.request_port import CallContext
from shelf_auth.ports.token_store_port import TokenStorePort
from shelf_auth.ports.user_port import UserDirectoryPort
from shelf_auth.sdk.cookies import AuthCookies, CookieSpec
from shelf_auth.services.credential_authenticator import CredentialAuthenticator
from shelf_auth.services.credential_hasher import CredentialHasher
from shelf_auth.services.request_authenticator import (
    BearerTokenStrategy,
    RequestAuthenticator,
    extract_refresh_token,
)
from shelf_auth.services.session_manager import SessionManager

logger = logging.getLogger("shelf_auth.client")


@dataclass
class AuthResult:
    """Outcome of login/refresh/logout, ready for any transport."""
    user: Optional[Dict[str, Any]] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    cookies: List[CookieSpec] = field(default_factory=list)


class AuthClient:
    """
    High-level auth client combining credentials, sessions and the guard.

    Example:
        from shelf_auth import AuthClient, AuthSettings

        client = AuthClient.from_settings(AuthSettings())

        client.register("a@example.com", "Str0ng_P@ssw0rd!", "A")
        result = client.login("a@example.com", "Str0ng_P@ssw0rd!")

        # Later, from a request handler
        user = client.authenticate(CallContext.http(request))

        # Rotate the refresh token
        result = client.refresh(result.refresh_token)
    """

    def __init__(
        self,
        settings: AuthSettings,
        users: UserDirectoryPort,
        token_store: TokenStorePort,
        access_tokens: Optional[AccessTokenPort] = None,
        hasher: Optional[CredentialHasher] = None,
    ):
        """
        Initialize auth client with adapters.

        Args:
            settings: Auth configuration
            users: User directory adapter
            token_store: Refresh token store adapter
            access_tokens: Access token adapter (JWT from settings if None)
            hasher: Password hasher (bcrypt from settings if None)
        """
        self._settings = settings
        self.hasher = hasher or CredentialHasher.from_settings(settings)
        self.access_tokens = access_tokens or JWTAccessTokenAdapter.from_settings(settings)
        self.credentials = CredentialAuthenticator(users, self.hasher, self.access_tokens, settings)
        self.sessions = SessionManager(token_store, settings, self.hasher)
        self.guard = RequestAuthenticator(
            BearerTokenStrategy(self.access_tokens, users, cookie_name=settings.access_cookie_name),
            extractors=default_extractors(),
        )
        self.cookies = AuthCookies(settings)

    @classmethod
    def from_settings(
        cls,
        settings: AuthSettings,
        users: Optional[UserDirectoryPort] = None,
        token_store: Optional[TokenStorePort] = None,
    ) -> "AuthClient":
        """Build a client, defaulting to in-memory adapters."""
        return cls(
            settings=settings,
            users=users or MemoryUserDirectory(),
            token_store=token_store or MemoryTokenStore(),
        )

    def register(
        self,
        email: str,
        password: str,
        display_name: str,
        profile_image: Optional[str] = None,
        timezone: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Register a new user.

        Returns:
            Public user dict
        """
        user = self.credentials.register(
            email,
            password,
            display_name,
            profile_image=profile_image,
            timezone=timezone,
            preferences=preferences,
        )
        return user.to_dict()

    def login(
        self,
        email: str,
        password: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """
        Log in with email and password (access token + refresh token).

        Args:
            email: Account email
            password: Account password
            user_agent: Client user agent, stored with the refresh token
            ip_address: Client IP, stored with the refresh token

        Returns:
            AuthResult with both tokens and the cookies to set
        """
        access_token, user = self.credentials.login(email, password)
        refresh_token, _ = self.sessions.issue(user, user_agent=user_agent, ip_address=ip_address)
        return self._result(user, access_token, refresh_token)

    def refresh(
        self,
        refresh_token: Optional[str],
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """
        Rotate a refresh token and mint a new access token.

        Raises:
            UnauthenticatedError: Missing, invalid, expired, revoked or
                already-rotated refresh token, or a deleted owner
        """
        if not refresh_token:
            raise UnauthenticatedError("Refresh token not provided")

        new_refresh_token, record = self.sessions.rotate(
            refresh_token, user_agent=user_agent, ip_address=ip_address
        )

        user = self.credentials.find_by_id(record.user_id)
        if user is None:
            self.sessions.revoke(new_refresh_token)
            raise UnauthenticatedError("Invalid refresh token")

        access_token = self.credentials.issue_access_token(user)
        return self._result(user, access_token, new_refresh_token)

    def refresh_from_context(self, context: CallContext) -> AuthResult:
        """Rotate the refresh token carried by an HTTP or GraphQL call."""
        raw = self.guard.resolve_request(context)
        if raw is None:
            raise UnauthenticatedError("Refresh token not provided")

        token = extract_refresh_token(raw, self._settings.refresh_cookie_name)
        return self.refresh(token, user_agent=raw.user_agent, ip_address=raw.client_ip)

    def logout(self, refresh_token: Optional[str] = None) -> AuthResult:
        """
        End the current session.

        Revokes the presented refresh token (if any) and returns cookies
        that clear both credentials. Access tokens are stateless and stay
        valid until they expire.
        """
        if refresh_token:
            self.sessions.revoke(refresh_token)
        return AuthResult(cookies=self.cookies.clear_all())

    def logout_all(self, user_id: str) -> AuthResult:
        """End every session of a user."""
        self.sessions.revoke_all(user_id)
        return AuthResult(cookies=self.cookies.clear_all())

    def authenticate(self, context: CallContext) -> User:
        """
        Authenticate an HTTP or GraphQL call.

        Raises:
            UnauthenticatedError: If the call carries no valid access token
        """
        return self.guard.authenticate(context)

    def me(self, context: CallContext) -> Dict[str, Any]:
        """Public profile of the caller."""
        return self.authenticate(context).to_dict()

    def password_strength(self, password: str) -> Dict[str, Any]:
        """Strength score and feedback for a candidate password."""
        return self.hasher.assess(password).to_dict()

    def change_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        """
        Change a password and revoke every existing session of the user.
        """
        self.credentials.change_password(user_id, current_password, new_password)
        self.sessions.revoke_all(user_id)
        return True

    def update_profile(self, user_id: str, **changes: Any) -> Dict[str, Any]:
        return self.credentials.update_profile(user_id, **changes).to_dict()

    def delete_account(self, user_id: str) -> bool:
        """
        Revoke all sessions, then delete the user.

        Raises:
            NotFoundError: If the user does not exist
        """
        if self.credentials.find_by_id(user_id) is None:
            raise NotFoundError()

        self.sessions.revoke_all(user_id)
        return self.credentials.delete_account(user_id)

    def list_sessions(self, user_id: str) -> List[Dict[str, Any]]:
        """Active sessions of a user (without lookup keys)."""
        sessions = []
        for token in self.sessions.list_active(user_id):
            data = token.to_dict()
            data.pop("lookup_key")
            sessions.append(data)
        return sessions

    def _result(self, user: User, access_token: str, refresh_token: str) -> AuthResult:
        return AuthResult(
            user=user.to_dict(),
            access_token=access_token,
            refresh_token=refresh_token,
            cookies=self.cookies.issue(access_token, refresh_token),
        )
