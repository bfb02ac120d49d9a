"""
Credential Authenticator - Password login, registration and access token
issuance.

Every User returned from here is redacted: the password hash stays
inside the core.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from shelf_auth.config import AuthSettings
from shelf_auth.domain.clock import utcnow
from shelf_auth.domain.user import User
from shelf_auth.errors import (
    DuplicateCredentialError,
    InvalidCredentialError,
    InvalidEmailError,
    NotFoundError,
    WeakCredentialError,
)
from shelf_auth.ports.access_token_port import AccessTokenPort
from shelf_auth.ports.user_port import UserDirectoryPort
from shelf_auth.services.credential_hasher import CredentialHasher

logger = logging.getLogger("shelf_auth.credentials")

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

PROFILE_FIELDS = ("display_name", "profile_image", "timezone", "preferences")


class CredentialAuthenticator:
    """Validates email/password pairs and mints access tokens."""

    def __init__(
        self,
        users: UserDirectoryPort,
        hasher: CredentialHasher,
        access_tokens: AccessTokenPort,
        settings: AuthSettings,
    ):
        self._users = users
        self._hasher = hasher
        self._access_tokens = access_tokens
        self._min_score = settings.min_password_score
        self._disposable_domains = {d.lower() for d in settings.disposable_email_domains}
        self._access_ttl = settings.access_token_ttl_seconds
        self._dummy_hash: Optional[str] = None

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    def validate_email(self, email: str) -> None:
        """
        Reject malformed addresses and disposable-mail domains.

        Raises:
            InvalidEmailError: If the address is not acceptable
        """
        if not EMAIL_PATTERN.match(email):
            raise InvalidEmailError("Invalid email format")

        domain = email.rsplit("@", 1)[1]
        if domain in self._disposable_domains:
            raise InvalidEmailError("Disposable email addresses are not allowed")

    def _check_strength(self, password: str) -> None:
        score = self._hasher.score(password)
        if score < self._min_score:
            raise WeakCredentialError(score=score, minimum=self._min_score)

    def register(
        self,
        email: str,
        password: str,
        display_name: str,
        profile_image: Optional[str] = None,
        timezone: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> User:
        """
        Register a new user.

        Raises:
            InvalidEmailError: Malformed or disposable email
            DuplicateCredentialError: Email already registered
            WeakCredentialError: Password scores below the minimum

        Returns:
            The new user (redacted)
        """
        email = self.normalize_email(email)
        self.validate_email(email)

        if self._users.find_by_email(email):
            raise DuplicateCredentialError()

        self._check_strength(password)

        user = User.create(
            email=email,
            password_hash=self._hasher.hash(password),
            display_name=display_name,
            profile_image=profile_image,
            timezone=timezone,
            preferences=preferences,
        )
        user = self._users.create(user)

        logger.info("Registered user %s", user.user_id)
        return user.redacted()

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Check an email/password pair and issue an access token.

        Unknown email and wrong password raise the same error, and both
        pay for one bcrypt comparison.

        Raises:
            InvalidCredentialError: On any mismatch

        Returns:
            (access token, user) with the user redacted
        """
        user = self._users.find_by_email(self.normalize_email(email))

        if user is None:
            self._hasher.verify(password, self._get_dummy_hash())
            logger.warning("Failed login attempt")
            raise InvalidCredentialError()

        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentialError()

        logger.info("User %s logged in", user.user_id)
        return self.issue_access_token(user), user.redacted()

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(self._hasher.random_token(16))
        return self._dummy_hash

    def issue_access_token(self, user: User) -> str:
        """Signed access token embedding id, email and role."""
        return self._access_tokens.create_token(user, expires_in=self._access_ttl)

    def find_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.find_by_id(user_id)
        return user.redacted() if user else None

    def get_by_id(self, user_id: str) -> User:
        """
        Raises:
            NotFoundError: If the user no longer exists
        """
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user

    def list_users(self) -> List[User]:
        return [user.redacted() for user in self._users.list_all()]

    def update_profile(self, user_id: str, **changes: Any) -> User:
        """
        Update profile fields (display_name, profile_image, timezone,
        preferences). None values are ignored.

        Raises:
            NotFoundError: If the user no longer exists
        """
        unknown = set(changes) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Not a profile field: {sorted(unknown)}")

        changes = {name: value for name, value in changes.items() if value is not None}
        user = self._users.update(user_id, changes) if changes else self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user.redacted()

    def change_password(self, user_id: str, current_password: str, new_password: str) -> User:
        """
        Replace a user's password after checking the current one.

        Callers are expected to revoke the user's sessions afterwards.

        Raises:
            NotFoundError: If the user no longer exists
            InvalidCredentialError: Current password is wrong
            WeakCredentialError: New password scores below the minimum
        """
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError()

        if not self._hasher.verify(current_password, user.password_hash):
            raise InvalidCredentialError("Current password is incorrect")

        self._check_strength(new_password)

        updated = self._users.update(user_id, {"password_hash": self._hasher.hash(new_password)})
        if updated is None:
            raise NotFoundError()

        logger.info("Password changed for user %s", user_id)
        return updated.redacted()

    def verify_email(self, user_id: str) -> User:
        """Mark a user's email address as verified."""
        user = self._users.update(user_id, {"verified_at": utcnow()})
        if user is None:
            raise NotFoundError()
        return user.redacted()

    def delete_account(self, user_id: str) -> bool:
        """Delete a user record. Session cleanup is the caller's job."""
        deleted = self._users.delete(user_id)
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted
