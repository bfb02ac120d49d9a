"""
Domain Models - Pure business entities.

No infrastructure dependencies. Domain logic only.
"""

from shelf_auth.domain.user import User, UserRole
from shelf_auth.domain.refresh_token import RefreshToken, TokenStatus
from shelf_auth.domain.claims import AccessClaims

__all__ = [
    "User",
    "UserRole",
    "RefreshToken",
    "TokenStatus",
    "AccessClaims",
]
