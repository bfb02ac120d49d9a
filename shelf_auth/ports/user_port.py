"""
User Directory Port - Interface for principal records.

Implementations:
- MemoryUserDirectory: In-memory directory (testing only)

Production deployments plug in their own database-backed directory.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from shelf_auth.domain.user import User


class UserDirectoryPort(ABC):
    """Port: Look up, create and update user records."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        """
        Get a user by ID.

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by normalized email.

        Returns:
            User if found, None otherwise
        """
        pass

    @abstractmethod
    def create(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateCredentialError: If the email is already registered
        """
        pass

    @abstractmethod
    def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        """
        Apply field changes to a user and bump updated_at.

        Args:
            user_id: User ID
            changes: Field name to new value

        Returns:
            Updated user, None if not found
        """
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """
        Delete a user.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def list_all(self) -> List[User]:
        """List every user."""
        pass
