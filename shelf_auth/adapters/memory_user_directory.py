"""
Memory User Directory - In-memory user records (testing only).
"""

import threading
from dataclasses import replace
from typing import Optional, List, Dict, Any
from shelf_auth.ports.user_port import UserDirectoryPort
from shelf_auth.domain.user import User
from shelf_auth.domain.clock import utcnow
from shelf_auth.errors import DuplicateCredentialError


class MemoryUserDirectory(UserDirectoryPort):
    """
    In-memory user directory.

    Enforces email uniqueness with a secondary index.
    Suitable for tests and local development only.
    """

    # Fields a caller may change through update()
    MUTABLE_FIELDS = {
        "email",
        "display_name",
        "password_hash",
        "role",
        "profile_image",
        "timezone",
        "preferences",
        "verified_at",
    }

    def __init__(self):
        """Initialize in-memory storage."""
        # Format: {user_id: User}
        self._users: Dict[str, User] = {}
        # Format: {email: user_id}
        self._emails: Dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._emails.get(email.strip().lower())
            return replace(self._users[user_id]) if user_id else None

    def create(self, user: User) -> User:
        """Store a new user, rejecting a taken email."""
        with self._lock:
            if user.email in self._emails:
                raise DuplicateCredentialError()

            self._users[user.user_id] = replace(user)
            self._emails[user.email] = user.user_id
            return replace(user)

    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        """Apply changes to a stored user."""
        unknown = set(changes) - self.MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self._lock:
            user = self._users.get(user_id)
            if not user:
                return None

            new_email = changes.get("email", user.email)
            if new_email != user.email:
                if new_email in self._emails:
                    raise DuplicateCredentialError()
                del self._emails[user.email]
                self._emails[new_email] = user_id

            updated = replace(user, **changes, updated_at=utcnow())
            self._users[user_id] = updated
            return replace(updated)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            user = self._users.pop(user_id, None)
            if not user:
                return False

            del self._emails[user.email]
            return True

    def list_all(self) -> List[User]:
        with self._lock:
            return [replace(user) for user in self._users.values()]
