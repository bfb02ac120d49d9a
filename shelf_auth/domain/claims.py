"""
Access Token Claims - What a verified access token asserts.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shelf_auth.domain.user import UserRole


@dataclass(frozen=True)
class AccessClaims:
    """Decoded, signature-checked access token payload."""
    sub: str
    email: Optional[str]
    role: UserRole
    issued_at: datetime
    expires_at: datetime
    issuer: str
