"""
Integration tests for the complete authentication flow.

Register -> Login -> Authenticate (HTTP / GraphQL) -> Refresh -> Logout
"""

import pytest
from types import SimpleNamespace
from shelf_auth import AuthClient
from shelf_auth.errors import (
    DuplicateCredentialError,
    InvalidCredentialError,
    NotFoundError,
    UnauthenticatedError,
    WeakCredentialError,
)
from shelf_auth.ports.request_port import CallContext

STRONG_PASSWORD = "Str0ng_P@ssw0rd!"


def bearer(token):
    return CallContext.http({"headers": {"Authorization": f"Bearer {token}"}})


def test_complete_auth_flow(client):
    """Test register, login, authenticate, refresh and reuse detection."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A")
    assert registered["email"] == "a@x.com"
    assert "password_hash" not in registered

    result = client.login("a@x.com", STRONG_PASSWORD, user_agent="pytest", ip_address="127.0.0.1")
    assert result.user["user_id"] == registered["user_id"]
    assert result.access_token
    assert result.refresh_token

    user = client.authenticate(bearer(result.access_token))
    assert user.user_id == registered["user_id"]

    refreshed = client.refresh(result.refresh_token)
    assert refreshed.refresh_token != result.refresh_token
    assert client.authenticate(bearer(refreshed.access_token)).user_id == registered["user_id"]

    with pytest.raises(UnauthenticatedError):
        client.refresh(result.refresh_token)

    # The rotated token is still good
    assert client.refresh(refreshed.refresh_token).refresh_token


def test_login_sets_cookies(client):
    """Test login returns HTTP-only cookies for both tokens."""
    client.register("a@x.com", STRONG_PASSWORD, "A")

    result = client.login("a@x.com", STRONG_PASSWORD)

    cookies = {c.name: c for c in result.cookies}
    assert cookies["access_token"].value == result.access_token
    assert cookies["refresh_token"].value == result.refresh_token
    assert all(c.http_only for c in result.cookies)


def test_cookie_session_over_graphql(client):
    """Test a cookie-only browser session works through a GraphQL context."""
    client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)

    request = SimpleNamespace(
        headers={"User-Agent": "Mozilla/5.0"},
        cookies={c.name: c.value for c in result.cookies},
        client=SimpleNamespace(host="10.0.0.2"),
    )
    context = CallContext.graphql({"request": request})

    assert client.me(context)["email"] == "a@x.com"

    refreshed = client.refresh_from_context(context)
    assert refreshed.refresh_token != result.refresh_token

    sessions = client.list_sessions(refreshed.user["user_id"])
    assert len(sessions) == 1
    assert sessions[0]["user_agent"] == "Mozilla/5.0"
    assert sessions[0]["ip_address"] == "10.0.0.2"
    assert "lookup_key" not in sessions[0]


def test_refresh_from_body(client):
    """Test a refresh token posted in the request body."""
    client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)

    context = CallContext.http({"headers": {}, "body": {"refreshToken": result.refresh_token}})

    assert client.refresh_from_context(context).access_token


def test_refresh_without_token(client):
    """Test refresh requires a token."""
    with pytest.raises(UnauthenticatedError):
        client.refresh(None)

    with pytest.raises(UnauthenticatedError):
        client.refresh_from_context(CallContext.http({"headers": {}}))


def test_logout(client):
    """Test logout revokes the refresh token and clears cookies."""
    client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)
    other_device = client.login("a@x.com", STRONG_PASSWORD)

    logged_out = client.logout(result.refresh_token)

    assert all(c.is_deletion for c in logged_out.cookies)
    with pytest.raises(UnauthenticatedError):
        client.refresh(result.refresh_token)
    assert client.refresh(other_device.refresh_token).access_token


def test_logout_all(client):
    """Test logout_all ends every session."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A")
    first = client.login("a@x.com", STRONG_PASSWORD)
    second = client.login("a@x.com", STRONG_PASSWORD)

    client.logout_all(registered["user_id"])

    for result in (first, second):
        with pytest.raises(UnauthenticatedError):
            client.refresh(result.refresh_token)


def test_change_password_revokes_sessions(client):
    """Test a password change ends all sessions."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)

    client.change_password(registered["user_id"], STRONG_PASSWORD, "N3w_Secur3_P@ss!")

    with pytest.raises(UnauthenticatedError):
        client.refresh(result.refresh_token)
    with pytest.raises(InvalidCredentialError):
        client.login("a@x.com", STRONG_PASSWORD)
    assert client.login("a@x.com", "N3w_Secur3_P@ss!").access_token


def test_delete_account(client):
    """Test deletion revokes sessions and invalidates outstanding access tokens."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)

    assert client.delete_account(registered["user_id"]) is True

    with pytest.raises(UnauthenticatedError):
        client.authenticate(bearer(result.access_token))
    with pytest.raises(UnauthenticatedError):
        client.refresh(result.refresh_token)
    with pytest.raises(NotFoundError):
        client.delete_account(registered["user_id"])


def test_registration_errors(client):
    """Test duplicate and weak registrations."""
    client.register("a@x.com", STRONG_PASSWORD, "A")

    with pytest.raises(DuplicateCredentialError) as duplicate:
        client.register("A@X.com", STRONG_PASSWORD, "A")
    assert duplicate.value.http_status == 409

    with pytest.raises(WeakCredentialError):
        client.register("b@x.com", "password", "B")


def test_update_profile(client):
    """Test profile updates through the client."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A")

    updated = client.update_profile(registered["user_id"], display_name="Alice")

    assert updated["display_name"] == "Alice"


def test_password_strength(client):
    """Test the strength endpoint payload."""
    weak = client.password_strength("abc")
    strong = client.password_strength(STRONG_PASSWORD)

    assert weak["strength"] < 30
    assert strong["strength"] >= 80
    assert strong["feedback"] == "Strong password."


def test_from_settings_defaults(settings):
    """Test the client wires in-memory adapters by default."""
    client = AuthClient.from_settings(settings)

    client.register("a@x.com", STRONG_PASSWORD, "A")
    assert client.login("a@x.com", STRONG_PASSWORD).access_token


def test_mapping_request_session(client, scope_request):
    """Test a Starlette-style request authenticates and refreshes over HTTP and GraphQL."""
    client.register("a@x.com", STRONG_PASSWORD, "A")
    result = client.login("a@x.com", STRONG_PASSWORD)

    request = scope_request(headers={
        "Authorization": f"Bearer {result.access_token}",
        "Cookie": f"refresh_token={result.refresh_token}",
        "User-Agent": "Mozilla/5.0",
    })

    assert client.authenticate(CallContext.http(request)).email == "a@x.com"
    assert client.me(CallContext.graphql({"request": request}))["email"] == "a@x.com"

    refreshed = client.refresh_from_context(CallContext.http(request))
    assert refreshed.refresh_token != result.refresh_token

    with pytest.raises(UnauthenticatedError):
        client.refresh_from_context(CallContext.graphql({"request": request}))


def test_register_preferences(client):
    """Test registration stores preferences."""
    registered = client.register("a@x.com", STRONG_PASSWORD, "A", preferences={"theme": "dark"})

    assert registered["preferences"] == {"theme": "dark"}
