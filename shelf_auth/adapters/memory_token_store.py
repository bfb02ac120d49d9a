"""
Memory Token Store - In-memory refresh token storage (testing only).
"""

import threading
from dataclasses import replace
from typing import Callable, Optional, List, Dict
from datetime import datetime
from shelf_auth.ports.token_store_port import TokenStorePort
from shelf_auth.domain.refresh_token import RefreshToken
from shelf_auth.domain.clock import utcnow


class MemoryTokenStore(TokenStorePort):
    """
    In-memory refresh token storage.

    Records past expires_at are dropped the next time their owner's
    records are listed or bulk-revoked, as Redis evicts them by TTL.

    WARNING: Only for testing. Records are lost on restart.
    Not suitable for production or distributed deployments.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize in-memory storage.

        Args:
            clock: Returns the current aware UTC time (injectable for tests)
        """
        self._tokens: Dict[str, RefreshToken] = {}
        self._user_tokens: Dict[str, List[str]] = {}
        self._lock = threading.Lock()
        self._clock = clock or utcnow

    def save(self, token: RefreshToken) -> None:
        """Store a new record in memory."""
        with self._lock:
            if token.lookup_key in self._tokens:
                raise ValueError("lookup_key already stored")

            self._tokens[token.lookup_key] = replace(token)
            self._user_tokens.setdefault(token.user_id, []).append(token.lookup_key)

    def find_by_lookup_key(self, lookup_key: str) -> Optional[RefreshToken]:
        """Get a record from memory."""
        with self._lock:
            token = self._tokens.get(lookup_key)
            return replace(token) if token else None

    def revoke(self, lookup_key: str, revoked_at: datetime) -> bool:
        """Revoke one record under the store lock."""
        with self._lock:
            token = self._tokens.get(lookup_key)
            if not token:
                return False
            return token.revoke(revoked_at)

    def revoke_all_for_user(self, user_id: str, revoked_at: datetime) -> int:
        """Revoke the user's current records under the store lock."""
        with self._lock:
            count = 0
            for lookup_key in self._prune(user_id):
                if self._tokens[lookup_key].revoke(revoked_at):
                    count += 1
            return count

    def list_by_user(self, user_id: str) -> List[RefreshToken]:
        """List all unexpired records for a user."""
        with self._lock:
            return [replace(self._tokens[lookup_key]) for lookup_key in self._prune(user_id)]

    def _prune(self, user_id: str) -> List[str]:
        """Drop the user's expired records; return the remaining keys. Caller holds the lock."""
        now = self._clock()
        kept = []
        for lookup_key in self._user_tokens.get(user_id, []):
            if now >= self._tokens[lookup_key].expires_at:
                del self._tokens[lookup_key]
            else:
                kept.append(lookup_key)

        if kept:
            self._user_tokens[user_id] = kept
        else:
            self._user_tokens.pop(user_id, None)
        return kept
