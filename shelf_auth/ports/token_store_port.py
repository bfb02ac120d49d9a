"""
Token Store Port - Interface for refresh token persistence.

Implementations:
- RedisTokenStore: Redis-backed records
- MemoryTokenStore: In-memory records (testing only)
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime
from shelf_auth.domain.refresh_token import RefreshToken


class TokenStorePort(ABC):
    """Port: Persist refresh token records keyed by lookup key."""

    @abstractmethod
    def save(self, token: RefreshToken) -> None:
        """
        Persist a new refresh token record.

        Args:
            token: Record to store (lookup_key must be unique)
        """
        pass

    @abstractmethod
    def find_by_lookup_key(self, lookup_key: str) -> Optional[RefreshToken]:
        """
        Get a record by lookup key, whatever its status.

        Args:
            lookup_key: Deterministic key derived from the plaintext

        Returns:
            Record if found, None otherwise
        """
        pass

    @abstractmethod
    def revoke(self, lookup_key: str, revoked_at: datetime) -> bool:
        """
        Atomically revoke one record (compare-and-set on its status).

        Args:
            lookup_key: Record to revoke
            revoked_at: Revocation timestamp

        Returns:
            True if this call revoked it, False if not found or already revoked
        """
        pass

    @abstractmethod
    def revoke_all_for_user(self, user_id: str, revoked_at: datetime) -> int:
        """
        Revoke every record the user owns at call time, all-or-nothing.

        Records saved after the call started are left untouched.

        Args:
            user_id: Owning principal
            revoked_at: Revocation timestamp

        Returns:
            Number of records moved to REVOKED
        """
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[RefreshToken]:
        """
        List a user's records, whatever their status. Records past
        expires_at may already have been evicted.

        Args:
            user_id: Owning principal

        Returns:
            List of records
        """
        pass
