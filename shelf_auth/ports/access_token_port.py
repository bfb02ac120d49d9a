"""
Access Token Port - Interface for signing and verifying access tokens.

Implementations:
- JWTAccessTokenAdapter: HMAC/RSA-signed JWTs via PyJWT
"""

from abc import ABC, abstractmethod
from typing import Optional
from shelf_auth.domain.user import User
from shelf_auth.domain.claims import AccessClaims


class AccessTokenPort(ABC):
    """Port: Issue and verify short-lived, stateless access tokens."""

    @abstractmethod
    def create_token(self, user: User, expires_in: Optional[int] = None) -> str:
        """
        Create a signed access token for a user.

        Args:
            user: User to create token for
            expires_in: Token expiration in seconds (adapter default if None)

        Returns:
            Encoded access token
        """
        pass

    @abstractmethod
    def decode_token(self, token: str) -> Optional[AccessClaims]:
        """
        Verify signature and expiry and return the claims.

        Args:
            token: Encoded access token

        Returns:
            Claims if valid, None if missing, malformed, expired or forged
        """
        pass

    def verify_token(self, token: str) -> bool:
        """
        Verify if a token is valid without extracting claims.

        Args:
            token: Token to verify

        Returns:
            True if valid, False otherwise
        """
        return self.decode_token(token) is not None
