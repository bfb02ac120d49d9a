"""
Adapters - Implementations of ports.

Access tokens:
- JWTAccessTokenAdapter: Signed JWT access tokens

Refresh token storage:
- RedisTokenStore: Redis-backed records
- MemoryTokenStore: In-memory records (testing)

User records:
- MemoryUserDirectory: In-memory directory (testing)

Transport:
- HttpRequestExtractor: Direct HTTP requests
- GraphQLRequestExtractor: GraphQL contexts wrapping an HTTP request
"""

# Access tokens
from shelf_auth.adapters.jwt_access_token import JWTAccessTokenAdapter

# Refresh token storage
from shelf_auth.adapters.redis_token_store import RedisTokenStore
from shelf_auth.adapters.memory_token_store import MemoryTokenStore

# User records
from shelf_auth.adapters.memory_user_directory import MemoryUserDirectory

# Transport
from shelf_auth.adapters.request_context import (
    GraphQLRequestExtractor,
    HttpRequestExtractor,
    default_extractors,
)

__all__ = [
    # Access tokens
    "JWTAccessTokenAdapter",
    # Refresh token storage
    "RedisTokenStore",
    "MemoryTokenStore",
    # User records
    "MemoryUserDirectory",
    # Transport
    "GraphQLRequestExtractor",
    "HttpRequestExtractor",
    "default_extractors",
]
