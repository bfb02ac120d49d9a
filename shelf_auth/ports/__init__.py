"""
Ports - Interfaces for access tokens, token storage, user records and
request extraction.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from shelf_auth.ports.access_token_port import AccessTokenPort
from shelf_auth.ports.token_store_port import TokenStorePort
from shelf_auth.ports.user_port import UserDirectoryPort
from shelf_auth.ports.request_port import (
    CallContext,
    ContextKind,
    RawRequest,
    RequestExtractor,
    parse_cookie_header,
)

__all__ = [
    # Tokens
    "AccessTokenPort",
    "TokenStorePort",
    # Users
    "UserDirectoryPort",
    # Transport
    "CallContext",
    "ContextKind",
    "RawRequest",
    "RequestExtractor",
    "parse_cookie_header",
]
