"""
SDK - Facade used by the HTTP controllers and GraphQL resolvers.
"""

from shelf_auth.sdk.client import AuthClient, AuthResult
from shelf_auth.sdk.cookies import AuthCookies, CookieSpec

__all__ = [
    "AuthClient",
    "AuthResult",
    "AuthCookies",
    "CookieSpec",
]
