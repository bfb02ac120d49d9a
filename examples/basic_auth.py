"""
Basic Authentication Example - password login with rotating refresh tokens.
"""

import logging

from shelf_auth import AuthClient, AuthSettings
from shelf_auth.errors import UnauthenticatedError
from shelf_auth.ports.request_port import CallContext


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Initialize auth client (in-memory users and refresh tokens)
    settings = AuthSettings(jwt_secret="my-secret-key", bcrypt_rounds=4)
    client = AuthClient.from_settings(settings)

    print(client.password_strength("Str0ng_P@ssw0rd!"))

    # Register a user
    user = client.register("alice@example.com", "Str0ng_P@ssw0rd!", "Alice")
    print(f"Created user: {user['display_name']} ({user['role']})")

    # Login (access token + refresh token)
    result = client.login("alice@example.com", "Str0ng_P@ssw0rd!", user_agent="example/1.0")
    print(f"\nLogin successful!")
    print(f"Access token: {result.access_token[:50]}...")
    for cookie in result.cookies:
        print(f"Set-Cookie: {cookie.header_value()[:60]}...")

    # Authenticate an HTTP request and a GraphQL execution with the same token
    request = {"headers": {"Authorization": f"Bearer {result.access_token}"}}
    via_http = client.authenticate(CallContext.http(request))
    via_graphql = client.authenticate(CallContext.graphql({"request": request}))
    print(f"\nHTTP principal: {via_http.email}")
    print(f"GraphQL principal: {via_graphql.email}")

    # Rotate the refresh token
    refreshed = client.refresh(result.refresh_token)
    print(f"\nRefreshed, sessions: {len(client.list_sessions(user['user_id']))}")

    # Replaying the old refresh token fails
    try:
        client.refresh(result.refresh_token)
    except UnauthenticatedError as e:
        print(f"Old refresh token rejected: {e}")

    # Logout
    logged_out = client.logout(refreshed.refresh_token)
    print(f"\nLogged out, clearing {[c.name for c in logged_out.cookies]}")
    print(f"Sessions after logout: {len(client.list_sessions(user['user_id']))}")


if __name__ == "__main__":
    main()
