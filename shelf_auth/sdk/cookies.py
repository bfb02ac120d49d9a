"""
Auth Cookies - HTTP-only cookie specs for the access and refresh tokens.

Both max-ages come from AuthSettings, the same values the token services
use, so a cookie never outlives (or dies before) the credential in it.
"""

from dataclasses import dataclass
from http.cookies import SimpleCookie
from typing import Any, Dict, List, Optional

from shelf_auth.config import AuthSettings


@dataclass(frozen=True)
class CookieSpec:
    """One Set-Cookie instruction, independent of the web framework."""
    name: str
    value: str
    max_age: int
    path: str
    domain: Optional[str]
    secure: bool
    http_only: bool = True
    same_site: str = "strict"

    @property
    def is_deletion(self) -> bool:
        return self.max_age == 0

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for Starlette/FastAPI Response.set_cookie()."""
        return {
            "key": self.name,
            "value": self.value,
            "max_age": self.max_age,
            "path": self.path,
            "domain": self.domain,
            "secure": self.secure,
            "httponly": self.http_only,
            "samesite": self.same_site,
        }

    def header_value(self) -> str:
        """Render as a Set-Cookie header value."""
        jar = SimpleCookie()
        jar[self.name] = self.value
        morsel = jar[self.name]
        morsel["max-age"] = self.max_age
        morsel["path"] = self.path
        if self.domain:
            morsel["domain"] = self.domain
        morsel["secure"] = self.secure
        morsel["httponly"] = self.http_only
        morsel["samesite"] = self.same_site.capitalize()
        return morsel.OutputString()


class AuthCookies:
    """Builds the cookies set on login/refresh and cleared on logout."""

    def __init__(self, settings: AuthSettings):
        self._settings = settings

    def _spec(self, name: str, value: str, max_age: int, path: str) -> CookieSpec:
        return CookieSpec(
            name=name,
            value=value,
            max_age=max_age,
            path=path,
            domain=self._settings.cookie_domain,
            secure=self._settings.is_production,
        )

    def access_cookie(self, access_token: str) -> CookieSpec:
        return self._spec(
            self._settings.access_cookie_name,
            access_token,
            self._settings.access_token_ttl_seconds,
            "/",
        )

    def refresh_cookie(self, refresh_token: str) -> CookieSpec:
        return self._spec(
            self._settings.refresh_cookie_name,
            refresh_token,
            int(self._settings.refresh_token_ttl.total_seconds()),
            self._settings.refresh_cookie_path,
        )

    def issue(self, access_token: str, refresh_token: str) -> List[CookieSpec]:
        return [self.access_cookie(access_token), self.refresh_cookie(refresh_token)]

    def clear_all(self) -> List[CookieSpec]:
        """Expired, empty cookies that remove both credentials."""
        return [
            self._spec(self._settings.access_cookie_name, "", 0, "/"),
            self._spec(self._settings.refresh_cookie_name, "", 0, self._settings.refresh_cookie_path),
        ]
