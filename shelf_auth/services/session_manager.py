"""
Session Manager - Refresh token issuance, verification, rotation and
revocation.

The plaintext refresh token is random and shown to the client once. The
store only ever sees its lookup key: an HMAC-SHA256 of the plaintext
under a server secret. The key is deterministic, so a presented token can
be found by equality, and without the secret a dumped store cannot be
turned back into usable bearer tokens. The randomized password hash is
never used here.
"""

import hashlib
import hmac
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from shelf_auth.config import AuthSettings
from shelf_auth.domain.clock import utcnow
from shelf_auth.domain.refresh_token import RefreshToken
from shelf_auth.domain.user import User
from shelf_auth.errors import UnauthenticatedError
from shelf_auth.ports.token_store_port import TokenStorePort
from shelf_auth.services.credential_hasher import CredentialHasher

logger = logging.getLogger("shelf_auth.sessions")


class SessionManager:
    """Refresh token state machine on top of a TokenStorePort."""

    def __init__(
        self,
        store: TokenStorePort,
        settings: AuthSettings,
        hasher: CredentialHasher,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            store: Refresh token persistence
            settings: Supplies the TTL and the lookup-key secret
            hasher: Source of random token plaintexts
            clock: Returns the current aware UTC time (injectable for tests)
        """
        self._store = store
        self._hasher = hasher
        self._ttl = settings.refresh_token_ttl
        self._lookup_secret = settings.token_lookup_secret.encode("utf-8")
        self._clock = clock or utcnow

    def lookup_key(self, plaintext: str) -> str:
        """Deterministic keyed hash of a token plaintext."""
        return hmac.new(self._lookup_secret, plaintext.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(
        self,
        user: User,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple[str, RefreshToken]:
        """
        Issue a new refresh token.

        Args:
            user: Owning principal
            user_agent: Client user agent
            ip_address: Client IP

        Returns:
            (plaintext, record). The plaintext is not recoverable later.
        """
        return self._issue(user.user_id, user_agent, ip_address)

    def _issue(
        self,
        user_id: str,
        user_agent: Optional[str],
        ip_address: Optional[str],
    ) -> Tuple[str, RefreshToken]:
        plaintext = self._hasher.random_token()
        token = RefreshToken.create(
            user_id=user_id,
            lookup_key=self.lookup_key(plaintext),
            ttl=self._ttl,
            user_agent=user_agent,
            ip_address=ip_address,
            now=self._clock(),
        )
        self._store.save(token)

        logger.info("Issued refresh token %s for user %s", token.token_id, user_id)
        return plaintext, token

    def verify(self, plaintext: str) -> Optional[RefreshToken]:
        """
        Find the valid record for a plaintext.

        Returns:
            Record if found, ACTIVE, unrevoked and unexpired; None otherwise
        """
        if not plaintext:
            return None

        token = self._store.find_by_lookup_key(self.lookup_key(plaintext))
        if not token or not token.is_valid(self._clock()):
            return None

        return token

    def revoke(self, plaintext: str) -> bool:
        """
        Revoke the record for a plaintext, whatever its current status.

        Returns:
            True if this call revoked it, False if unknown or already revoked
        """
        if not plaintext:
            return False

        revoked = self._store.revoke(self.lookup_key(plaintext), self._clock())
        if revoked:
            logger.info("Revoked refresh token")
        return revoked

    def revoke_all(self, user_id: str) -> int:
        """
        Revoke every refresh token the user holds right now.

        Tokens issued after this call are not affected.

        Returns:
            Number of tokens revoked
        """
        count = self._store.revoke_all_for_user(user_id, self._clock())
        logger.info("Revoked %d refresh token(s) for user %s", count, user_id)
        return count

    def rotate(
        self,
        plaintext: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple[str, RefreshToken]:
        """
        Exchange a valid refresh token for a new one (single use).

        The presented token is revoked before the new one is issued. If a
        concurrent rotation revoked it first, this call fails closed.

        Raises:
            UnauthenticatedError: If the presented token is not valid

        Returns:
            (new plaintext, new record) for the same principal
        """
        current = self.verify(plaintext)
        if current is None:
            raise UnauthenticatedError("Invalid refresh token")

        if not self._store.revoke(current.lookup_key, self._clock()):
            logger.warning("Refresh token %s was already rotated", current.token_id)
            raise UnauthenticatedError("Invalid refresh token")

        new_plaintext, new_token = self._issue(
            current.user_id,
            user_agent or current.user_agent,
            ip_address or current.ip_address,
        )
        logger.info("Rotated refresh token %s -> %s", current.token_id, new_token.token_id)
        return new_plaintext, new_token

    def list_active(self, user_id: str) -> List[RefreshToken]:
        """Valid refresh tokens of a user."""
        now = self._clock()
        return [token for token in self._store.list_by_user(user_id) if token.is_valid(now)]
