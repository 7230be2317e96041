"""Request-scoped cookie access for the session store."""

from collections.abc import Mapping
from dataclasses import dataclass

from starlette.responses import Response

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"


@dataclass(frozen=True)
class CookiePolicy:
    """Attributes shared by both session cookies."""

    max_age: int
    secure: bool
    httponly: bool = True
    samesite: str = "lax"
    path: str = "/"


class RequestContext:
    """
    Cookie jar for one request/response pair.

    Reads come from the incoming request cookies; writes go to the outgoing
    response and are mirrored into the local view so later reads in the same
    request observe them.

    Attributes:
        policy: Cookie attributes applied on every write
        response: Outgoing response receiving Set-Cookie headers (optional)

    Example:
        >>> ctx = RequestContext(request.cookies, response, policy)
        >>> ctx.get(ACCESS_TOKEN_COOKIE)
    """

    def __init__(
        self,
        cookies: Mapping[str, str],
        response: Response | None,
        policy: CookiePolicy,
    ) -> None:
        self._cookies = dict(cookies)
        self.response = response
        self.policy = policy

    def get(self, name: str) -> str | None:
        """Return a non-empty cookie value, or None."""
        return self._cookies.get(name) or None

    @property
    def cookies(self) -> dict[str, str]:
        """Snapshot of the cookies as currently seen by this request."""
        return dict(self._cookies)

    def set(self, name: str, value: str) -> None:
        if self.response is not None:
            self.response.set_cookie(
                key=name,
                value=value,
                max_age=self.policy.max_age,
                path=self.policy.path,
                secure=self.policy.secure,
                httponly=self.policy.httponly,
                samesite=self.policy.samesite,
            )
        self._cookies[name] = value

    def delete(self, name: str) -> None:
        if self.response is not None:
            self.response.delete_cookie(
                key=name,
                path=self.policy.path,
                secure=self.policy.secure,
                httponly=self.policy.httponly,
                samesite=self.policy.samesite,
            )
        self._cookies.pop(name, None)
