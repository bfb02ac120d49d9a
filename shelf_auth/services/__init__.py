"""
Services - Authentication use cases built on the ports.
"""

from shelf_auth.services.credential_hasher import CredentialHasher, PasswordStrength
from shelf_auth.services.session_manager import SessionManager
from shelf_auth.services.credential_authenticator import CredentialAuthenticator
from shelf_auth.services.request_authenticator import (
    AuthFailure,
    BearerTokenStrategy,
    RequestAuthenticator,
    extract_bearer_token,
    extract_refresh_token,
)

__all__ = [
    "CredentialHasher",
    "PasswordStrength",
    "SessionManager",
    "CredentialAuthenticator",
    "AuthFailure",
    "BearerTokenStrategy",
    "RequestAuthenticator",
    "extract_bearer_token",
    "extract_refresh_token",
]
