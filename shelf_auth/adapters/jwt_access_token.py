"""
JWT Access Token Adapter - Implements AccessTokenPort with signed JWTs.
"""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from shelf_auth.ports.access_token_port import AccessTokenPort
from shelf_auth.domain.claims import AccessClaims
from shelf_auth.domain.user import User, UserRole


class JWTAccessTokenAdapter(AccessTokenPort):
    """
    JWT-based access token adapter.

    Uses PyJWT for token creation and verification. Tokens are stateless:
    nothing is stored, and they stay valid until exp.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "shelf-auth",
        expires_in: int = 3600,
    ):
        """
        Initialize JWT adapter.

        Args:
            secret: JWT signing secret
            algorithm: JWT algorithm (default HS256)
            issuer: Token issuer claim
            expires_in: Default token lifetime in seconds (default 1 hour)
        """
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, settings) -> "JWTAccessTokenAdapter":
        """Build the adapter from AuthSettings."""
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            issuer=settings.jwt_issuer,
            expires_in=settings.access_token_ttl_seconds,
        )

    def create_token(self, user: User, expires_in: Optional[int] = None) -> str:
        """
        Create a JWT access token for a user.

        Args:
            user: User to create token for
            expires_in: Token expiration in seconds

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.user_id,
            "email": user.email,
            "role": user.role.value,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(seconds=expires_in or self._expires_in),
            "iss": self._issuer,
        }

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> Optional[AccessClaims]:
        """
        Decode a JWT access token.

        Args:
            token: JWT token string

        Returns:
            Claims if valid, None if invalid
        """
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub"]},
            )

            if payload.get("type", "access") != "access":
                return None

            return AccessClaims(
                sub=payload["sub"],
                email=payload.get("email"),
                role=UserRole(payload.get("role", "user")),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                issuer=payload["iss"],
            )

        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        except (KeyError, ValueError, TypeError):
            return None
