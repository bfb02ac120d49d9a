"""
Unit tests for the HTTP and GraphQL request extractors.
"""

import pytest
from types import SimpleNamespace
from shelf_auth.adapters.request_context import (
    GraphQLRequestExtractor,
    HttpRequestExtractor,
    to_raw_request,
)
from shelf_auth.ports.request_port import CallContext, parse_cookie_header


def starlette_like_request(headers=None, cookies=None, host="10.0.0.1"):
    """Object shaped like a Starlette/FastAPI Request."""
    return SimpleNamespace(
        headers=headers or {},
        cookies=cookies or {},
        client=SimpleNamespace(host=host),
    )


def test_http_extractor_object():
    """Test a request object is normalized."""
    request = starlette_like_request(
        headers={"Authorization": "Bearer abc", "User-Agent": "Mozilla/5.0"},
        cookies={"access_token": "xyz"},
    )

    raw = HttpRequestExtractor().resolve_request(CallContext.http(request))

    assert raw.header("authorization") == "Bearer abc"
    assert raw.header("AUTHORIZATION") == "Bearer abc"
    assert raw.user_agent == "Mozilla/5.0"
    assert raw.cookies == {"access_token": "xyz"}
    assert raw.client_ip == "10.0.0.1"


def test_http_extractor_dict():
    """Test a plain dict request is normalized."""
    request = {
        "headers": {"authorization": "Bearer abc"},
        "ip": "127.0.0.1",
        "body": {"refresh_token": "r1"},
    }

    raw = HttpRequestExtractor().resolve_request(CallContext.http(request))

    assert raw.header("Authorization") == "Bearer abc"
    assert raw.client_ip == "127.0.0.1"
    assert raw.body == {"refresh_token": "r1"}
    assert raw.cookies == {}


def test_cookies_parsed_from_header():
    """Test cookies fall back to the raw Cookie header."""
    raw = to_raw_request({"headers": {"Cookie": "access_token=abc; theme=dark"}})

    assert raw.cookies == {"access_token": "abc", "theme": "dark"}


def test_parse_cookie_header_edge_cases():
    """Test empty and broken Cookie headers."""
    assert parse_cookie_header(None) == {}
    assert parse_cookie_header("") == {}
    assert parse_cookie_header("a=1") == {"a": "1"}


def test_graphql_extractor_dict_context():
    """Test a GraphQL context dict holding the request (Strawberry/Ariadne style)."""
    request = starlette_like_request(headers={"Authorization": "Bearer abc"})

    raw = GraphQLRequestExtractor().resolve_request(CallContext.graphql({"request": request}))

    assert raw.header("authorization") == "Bearer abc"


def test_graphql_extractor_req_key():
    """Test a GraphQL context using the 'req' key."""
    request = {"headers": {"Authorization": "Bearer abc"}}

    raw = GraphQLRequestExtractor().resolve_request(CallContext.graphql({"req": request}))

    assert raw.header("authorization") == "Bearer abc"


def test_graphql_extractor_object_context():
    """Test a GraphQL context object with a request attribute."""
    request = starlette_like_request(cookies={"access_token": "xyz"})
    context_value = SimpleNamespace(request=request)

    raw = GraphQLRequestExtractor().resolve_request(CallContext.graphql(context_value))

    assert raw.cookies == {"access_token": "xyz"}


def test_both_transports_resolve_identically():
    """Test HTTP and GraphQL yield the same RawRequest for the same request."""
    request = starlette_like_request(
        headers={"Authorization": "Bearer abc"},
        cookies={"refresh_token": "r1"},
    )

    via_http = HttpRequestExtractor().resolve_request(CallContext.http(request))
    via_graphql = GraphQLRequestExtractor().resolve_request(CallContext.graphql({"request": request}))

    assert via_http == via_graphql


def test_graphql_context_without_request():
    """Test a GraphQL context with no request resolves to None."""
    extractor = GraphQLRequestExtractor()

    assert extractor.resolve_request(CallContext.graphql({})) is None
    assert extractor.resolve_request(CallContext.graphql(None)) is None


def test_extractor_rejects_other_kind():
    """Test each extractor only accepts its own context kind."""
    with pytest.raises(ValueError):
        HttpRequestExtractor().resolve_request(CallContext.graphql({}))

    with pytest.raises(ValueError):
        GraphQLRequestExtractor().resolve_request(CallContext.http({}))


def test_mapping_request_prefers_attributes(scope_request):
    """Test a request that is also a Mapping over its ASGI scope uses its attributes."""
    request = scope_request(
        headers={"Authorization": "Bearer abc", "Cookie": "refresh_token=r1"},
        client=("10.0.0.7", 50000),
    )

    raw = HttpRequestExtractor().resolve_request(CallContext.http(request))

    assert raw.header("authorization") == "Bearer abc"
    assert raw.cookies == {"refresh_token": "r1"}
    assert raw.client_ip == "10.0.0.7"
    assert raw.body == {}


def test_mapping_request_over_graphql(scope_request):
    """Test the same Mapping request resolves identically inside a GraphQL context."""
    request = scope_request(headers={"Authorization": "Bearer abc"})

    via_http = HttpRequestExtractor().resolve_request(CallContext.http(request))
    via_graphql = GraphQLRequestExtractor().resolve_request(CallContext.graphql({"request": request}))

    assert via_http == via_graphql


def test_raw_asgi_headers():
    """Test byte-pair header lists and tuple clients straight from an ASGI scope."""
    raw = to_raw_request({
        "headers": [(b"authorization", b"Bearer abc"), (b"user-agent", b"curl/8.0")],
        "client": ("10.0.0.3", 1234),
    })

    assert raw.header("Authorization") == "Bearer abc"
    assert raw.user_agent == "curl/8.0"
    assert raw.client_ip == "10.0.0.3"
