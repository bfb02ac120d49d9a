"""
Refresh Token Domain Model - One logged-in device/session.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
from datetime import datetime, timedelta
from enum import Enum
import uuid

from shelf_auth.domain.clock import utcnow


class TokenStatus(Enum):
    """Refresh token lifecycle states."""
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


@dataclass
class RefreshToken:
    """
    Refresh token entity - the stored half of a session credential.

    Domain rules:
    - the plaintext is never stored, only its lookup_key
    - user_id is set at creation and never changes
    - valid iff ACTIVE, not revoked, and now < expires_at
    - a revoked token never becomes ACTIVE again
    - EXPIRED is observed from expires_at, not written eagerly
    """
    token_id: str
    user_id: str
    lookup_key: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    status: TokenStatus = TokenStatus.ACTIVE
    revoked_at: Optional[datetime] = None

    # Provenance
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    @classmethod
    def create(
        cls,
        user_id: str,
        lookup_key: str,
        ttl: timedelta,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "RefreshToken":
        """
        Create a new ACTIVE refresh token record.

        Args:
            user_id: Owning principal
            lookup_key: Deterministic derivation of the plaintext
            ttl: Lifetime from now
            user_agent: Client user agent
            ip_address: Client IP
            now: Creation time (defaults to the current UTC time)

        Returns:
            New refresh token instance
        """
        now = now or utcnow()
        return cls(
            token_id=str(uuid.uuid4()),
            user_id=user_id,
            lookup_key=lookup_key,
            expires_at=now + ttl,
            created_at=now,
            updated_at=now,
            status=TokenStatus.ACTIVE,
            user_agent=user_agent,
            ip_address=ip_address,
        )

    def is_revoked(self) -> bool:
        return self.revoked_at is not None or self.status == TokenStatus.REVOKED

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.status == TokenStatus.EXPIRED or now >= self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check if token is valid (active, not revoked, not expired)."""
        if self.status != TokenStatus.ACTIVE or self.revoked_at is not None:
            return False
        return not self.is_expired(now)

    def observed_status(self, now: Optional[datetime] = None) -> TokenStatus:
        """Status as seen at `now`, deriving EXPIRED from expires_at."""
        if self.is_revoked():
            return TokenStatus.REVOKED
        if self.is_expired(now):
            return TokenStatus.EXPIRED
        return TokenStatus.ACTIVE

    def revoke(self, now: Optional[datetime] = None) -> bool:
        """
        Revoke the token.

        Returns:
            True if this call revoked it, False if it was already revoked
        """
        if self.is_revoked():
            return False

        now = now or utcnow()
        self.status = TokenStatus.REVOKED
        self.revoked_at = now
        self.updated_at = now
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "token_id": self.token_id,
            "user_id": self.user_id,
            "lookup_key": self.lookup_key,
            "expires_at": self.expires_at.isoformat(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "status": self.status.value,
            "revoked_at": self.revoked_at.isoformat() if self.revoked_at else None,
            "user_agent": self.user_agent,
            "ip_address": self.ip_address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RefreshToken":
        """Deserialize from dict."""
        return cls(
            token_id=data["token_id"],
            user_id=data["user_id"],
            lookup_key=data["lookup_key"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            status=TokenStatus(data.get("status", "active")),
            revoked_at=datetime.fromisoformat(data["revoked_at"]) if data.get("revoked_at") else None,
            user_agent=data.get("user_agent"),
            ip_address=data.get("ip_address"),
        )
