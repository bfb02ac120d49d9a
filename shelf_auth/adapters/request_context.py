"""
Request Context Adapters - Resolve HTTP and GraphQL call contexts to one
request shape.

The HTTP variant receives the framework request directly. The GraphQL
variant receives the execution context value (Strawberry, Ariadne and
Graphene all put the HTTP request under "request", NestJS-style servers
under "req") and unwraps the request from it. Both then normalize the
request the same way, so token extraction never knows which transport
was used.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional
from shelf_auth.ports.request_port import (
    CallContext,
    ContextKind,
    RawRequest,
    RequestExtractor,
    parse_cookie_header,
)


def _lookup(source: Any, *names: str) -> Any:
    """
    First present attribute, else key, among names.

    Attributes win: a Starlette Request is also a Mapping over its ASGI
    scope, where "headers" is the raw byte list and not the Headers view.
    """
    for name in names:
        value = getattr(source, name, None)
        if value is None and isinstance(source, Mapping):
            value = source.get(name)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return value.decode("latin-1") if isinstance(value, (bytes, bytearray)) else str(value)


def _header_pairs(raw_headers: Any) -> Iterable:
    """(name, value) pairs from a mapping, a Headers view or an ASGI list."""
    if hasattr(raw_headers, "items"):
        return raw_headers.items()
    # ASGI scope: [(b"name", b"value"), ...]
    return [(name, value) for name, value in raw_headers]


def to_raw_request(request: Any) -> Optional[RawRequest]:
    """
    Normalize a framework request (or a plain dict) to a RawRequest.

    Understands objects exposing headers/cookies/client (Starlette,
    FastAPI, Flask), dicts with the same keys, and raw ASGI header lists.

    Args:
        request: Request object or dict

    Returns:
        RawRequest, None if request is None
    """
    if request is None:
        return None

    raw_headers = _lookup(request, "headers") or {}
    headers: Dict[str, str] = {}
    for name, value in _header_pairs(raw_headers):
        headers[_text(name).lower()] = _text(value)

    cookies = dict(_lookup(request, "cookies") or {})
    if not cookies:
        cookies = parse_cookie_header(headers.get("cookie"))

    client_ip = _lookup(request, "client_ip", "ip", "remote_addr")
    if client_ip is None:
        client = _lookup(request, "client")
        if isinstance(client, (tuple, list)) and not hasattr(client, "host"):
            client_ip = client[0] if client else None
        elif client is not None:
            client_ip = _lookup(client, "host")

    body = _lookup(request, "body")
    if not isinstance(body, Mapping):
        body = {}

    return RawRequest(
        headers=headers,
        cookies={str(k): str(v) for k, v in cookies.items()},
        client_ip=client_ip,
        body=dict(body),
    )


class HttpRequestExtractor(RequestExtractor):
    """Resolve a direct HTTP call: the payload is the request itself."""

    def resolve_request(self, context: CallContext) -> Optional[RawRequest]:
        if context.kind != ContextKind.HTTP:
            raise ValueError(f"Expected an HTTP context, got {context.kind.value}")
        return to_raw_request(context.payload)


class GraphQLRequestExtractor(RequestExtractor):
    """
    Resolve a GraphQL execution: the payload is the GraphQL context value,
    which wraps the HTTP request.
    """

    def __init__(self, request_keys=("request", "req")):
        """
        Args:
            request_keys: Context keys/attributes that may hold the request
        """
        self._request_keys = tuple(request_keys)

    def resolve_request(self, context: CallContext) -> Optional[RawRequest]:
        if context.kind != ContextKind.GRAPHQL:
            raise ValueError(f"Expected a GraphQL context, got {context.kind.value}")
        if context.payload is None:
            return None
        return to_raw_request(_lookup(context.payload, *self._request_keys))


def default_extractors() -> Dict[ContextKind, RequestExtractor]:
    """One extractor per supported context kind."""
    return {
        ContextKind.HTTP: HttpRequestExtractor(),
        ContextKind.GRAPHQL: GraphQLRequestExtractor(),
    }
