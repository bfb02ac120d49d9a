"""
Request Port - Transport-neutral view of an inbound call.

A CallContext says how the call arrived; a RequestExtractor turns it into
the RawRequest that token extraction works on, so the guard behaves the
same for plain HTTP and for GraphQL executions.

Implementations:
- HttpRequestExtractor: direct HTTP request
- GraphQLRequestExtractor: GraphQL context wrapping an HTTP request
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from http.cookies import CookieError, SimpleCookie
from typing import Any, Dict, Optional


class ContextKind(Enum):
    """How the call reached the application."""
    HTTP = "http"
    GRAPHQL = "graphql"


@dataclass
class CallContext:
    """
    Opaque call context handed to the guard.

    payload is the framework request for HTTP, or the GraphQL execution
    context value (which carries the request) for GraphQL.
    """
    kind: ContextKind
    payload: Any

    @classmethod
    def http(cls, request: Any) -> "CallContext":
        return cls(kind=ContextKind.HTTP, payload=request)

    @classmethod
    def graphql(cls, context_value: Any) -> "CallContext":
        return cls(kind=ContextKind.GRAPHQL, payload=context_value)


def parse_cookie_header(header: Optional[str]) -> Dict[str, str]:
    """
    Parse a raw Cookie header.

    Args:
        header: Value of the Cookie header

    Returns:
        Cookie name to value; empty if absent or unparseable
    """
    if not header:
        return {}

    jar = SimpleCookie()
    try:
        jar.load(header)
    except CookieError:
        return {}
    return {name: morsel.value for name, morsel in jar.items()}


@dataclass
class RawRequest:
    """Normalized request: lower-cased header names, parsed cookies."""
    headers: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    client_ip: Optional[str] = None
    body: Dict[str, Any] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @property
    def user_agent(self) -> Optional[str]:
        return self.header("user-agent")


class RequestExtractor(ABC):
    """Port: Resolve a call context to the underlying request."""

    @abstractmethod
    def resolve_request(self, context: CallContext) -> Optional[RawRequest]:
        """
        Extract the request carried by a call context.

        Args:
            context: Call context of this extractor's kind

        Returns:
            Normalized request, None if the context carries no request
        """
        pass
