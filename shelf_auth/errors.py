"""
Auth Errors - Client-facing failures raised by the authentication core.

None of these are retryable as-is: the caller must fix its input or
re-authenticate. http_status is a hint for the transport layer, which
decides the final HTTP status or GraphQL error shape.
"""


class AuthError(Exception):
    """Base class for authentication failures."""

    http_status = 400
    default_message = "Authentication error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DuplicateCredentialError(AuthError):
    """Registration email is already taken."""

    http_status = 409
    default_message = "Email is already registered"


class WeakCredentialError(AuthError):
    """Password scored below the configured minimum."""

    default_message = "Password is not strong enough"

    def __init__(self, score: int, minimum: int, message: str = None):
        super().__init__(message)
        self.score = score
        self.minimum = minimum


class InvalidEmailError(AuthError):
    """Malformed email or a disposable-mail domain."""

    default_message = "Invalid email address"


class InvalidCredentialError(AuthError):
    """Email/password mismatch. Never says which half was wrong."""

    http_status = 401
    default_message = "Invalid email or password"


class UnauthenticatedError(AuthError):
    """Missing, invalid, expired or revoked token."""

    http_status = 401
    default_message = "Authentication required"


class NotFoundError(AuthError):
    """A principal referenced by id no longer exists."""

    http_status = 404
    default_message = "User not found"
