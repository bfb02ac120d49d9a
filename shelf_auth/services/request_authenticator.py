"""
Request Authenticator - One authentication contract for HTTP and GraphQL.

Flow:
1. Pick the extractor for the context kind and resolve the RawRequest
2. BearerTokenStrategy pulls the access token (Authorization header,
   then cookie), verifies it and reloads the principal
3. The strategy answers User or AuthFailure; the guard turns any
   AuthFailure into UnauthenticatedError

The failure reason is logged at debug level and never returned.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from shelf_auth.domain.user import User
from shelf_auth.errors import UnauthenticatedError
from shelf_auth.ports.access_token_port import AccessTokenPort
from shelf_auth.ports.request_port import (
    CallContext,
    ContextKind,
    RawRequest,
    RequestExtractor,
    parse_cookie_header,
)
from shelf_auth.ports.user_port import UserDirectoryPort

logger = logging.getLogger("shelf_auth.guard")

BEARER_PREFIX = "bearer "

# JSON body keys a client may post the refresh token under
REFRESH_BODY_KEYS = ("refresh_token", "refreshToken")


@dataclass(frozen=True)
class AuthFailure:
    """Why a request did not authenticate (internal only)."""
    reason: str


def extract_bearer_token(raw: RawRequest, cookie_name: Optional[str] = None) -> Optional[str]:
    """
    Access token from `Authorization: Bearer <token>`, else from a cookie.

    Args:
        raw: Normalized request
        cookie_name: Cookie holding the access token, if cookies are used

    Returns:
        Token string, None if absent
    """
    authorization = raw.header("authorization")
    if authorization and authorization.lower().startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token

    if cookie_name:
        return raw.cookies.get(cookie_name) or None

    return None


def extract_refresh_token(raw: RawRequest, cookie_name: str) -> Optional[str]:
    """
    Refresh token from its cookie, then the request body (refresh_token or
    refreshToken), then the raw Cookie header.
    """
    token = raw.cookies.get(cookie_name)
    if token:
        return token

    for key in REFRESH_BODY_KEYS:
        token = raw.body.get(key)
        if isinstance(token, str) and token:
            return token

    return parse_cookie_header(raw.header("cookie")).get(cookie_name) or None


class BearerTokenStrategy:
    """Verify a bearer access token and load its principal."""

    def __init__(
        self,
        access_tokens: AccessTokenPort,
        users: UserDirectoryPort,
        cookie_name: Optional[str] = "access_token",
    ):
        """
        Args:
            access_tokens: Signature and expiry verifier
            users: Directory used to reload the principal
            cookie_name: Fallback cookie for the access token (None disables)
        """
        self._access_tokens = access_tokens
        self._users = users
        self._cookie_name = cookie_name

    def validate(self, raw: RawRequest) -> Union[User, AuthFailure]:
        """
        Authenticate a normalized request.

        Returns:
            The principal (redacted), or an AuthFailure describing the miss
        """
        token = extract_bearer_token(raw, self._cookie_name)
        if not token:
            return AuthFailure("missing token")

        claims = self._access_tokens.decode_token(token)
        if claims is None:
            return AuthFailure("invalid or expired token")

        user = self._users.find_by_id(claims.sub)
        if user is None:
            return AuthFailure("principal no longer exists")

        return user.redacted()


class RequestAuthenticator:
    """Guard: resolve the request for any transport, then authenticate it."""

    def __init__(
        self,
        strategy: BearerTokenStrategy,
        extractors: Dict[ContextKind, RequestExtractor],
    ):
        """
        Args:
            strategy: Credential verification strategy
            extractors: Extractor per context kind
        """
        self._strategy = strategy
        self._extractors = dict(extractors)

    def resolve_request(self, context: CallContext) -> Optional[RawRequest]:
        """
        Normalize a call context to its underlying request.

        Returns:
            RawRequest, None if the context carries no usable request
        """
        extractor = self._extractors.get(context.kind)
        if extractor is None:
            return None

        try:
            return extractor.resolve_request(context)
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("Could not resolve request from %s context: %s", context.kind.value, e)
            return None

    def check(self, context: CallContext) -> Union[User, AuthFailure]:
        """Authenticate without raising."""
        raw = self.resolve_request(context)
        if raw is None:
            return AuthFailure("no request in context")
        return self._strategy.validate(raw)

    def authenticate(self, context: CallContext) -> User:
        """
        Authenticate a call.

        Raises:
            UnauthenticatedError: For any missing, malformed, expired or
                orphaned credential

        Returns:
            The authenticated principal (redacted)
        """
        result = self.check(context)
        if isinstance(result, AuthFailure):
            logger.debug("Rejected %s request: %s", context.kind.value, result.reason)
            raise UnauthenticatedError()
        return result

    def authenticate_optional(self, context: CallContext) -> Optional[User]:
        """The principal, or None for anonymous/invalid calls."""
        result = self.check(context)
        return None if isinstance(result, AuthFailure) else result
