"""
User Domain Model - The authenticated principal.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum
import uuid

from shelf_auth.domain.clock import utcnow


class UserRole(Enum):
    """User roles."""
    USER = "user"      # Standard account
    ADMIN = "admin"    # Operator account


@dataclass
class User:
    """
    User entity - represents a registered principal.

    Domain rules:
    - user_id is immutable
    - email is stored trimmed and lowercase, and is unique (enforced by adapter)
    - password_hash never leaves the core (excluded from repr and to_dict)
    """
    user_id: str
    email: str
    display_name: str
    password_hash: Optional[str] = field(default=None, repr=False)
    role: UserRole = UserRole.USER

    # Optional profile fields
    profile_image: Optional[str] = None
    timezone: Optional[str] = None
    preferences: Dict[str, Any] = field(default_factory=dict)

    # Lifecycle
    verified_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(
        cls,
        email: str,
        password_hash: str,
        display_name: str,
        role: UserRole = UserRole.USER,
        profile_image: Optional[str] = None,
        timezone: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> "User":
        """
        Create a new user with a generated ID.

        Args:
            email: Normalized email address
            password_hash: Stored password representation
            display_name: Name shown to other users
            role: Account role (default standard user)
            profile_image: Optional avatar URL
            timezone: Optional IANA timezone name
            preferences: Optional free-form preferences

        Returns:
            New user instance
        """
        now = utcnow()
        return cls(
            user_id=str(uuid.uuid4()),
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            role=role,
            profile_image=profile_image,
            timezone=timezone,
            preferences=preferences or {},
            created_at=now,
            updated_at=now,
        )

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def redacted(self) -> "User":
        """Copy of this user without the password hash."""
        return replace(self, password_hash=None, preferences=dict(self.preferences))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (never includes the password hash)."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "display_name": self.display_name,
            "role": self.role.value,
            "profile_image": self.profile_image,
            "timezone": self.timezone,
            "preferences": self.preferences,
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_record(self) -> Dict[str, Any]:
        """Serialize for a persistence adapter (includes the password hash)."""
        data = self.to_dict()
        data["password_hash"] = self.password_hash
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Deserialize from dict or persisted record."""
        return cls(
            user_id=data["user_id"],
            email=data["email"],
            display_name=data["display_name"],
            password_hash=data.get("password_hash"),
            role=UserRole(data.get("role", "user")),
            profile_image=data.get("profile_image"),
            timezone=data.get("timezone"),
            preferences=data.get("preferences") or {},
            verified_at=datetime.fromisoformat(data["verified_at"]) if data.get("verified_at") else None,
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else utcnow(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else utcnow(),
        )
