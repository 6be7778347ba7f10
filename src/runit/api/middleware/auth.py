"""
HTTP basic-auth middleware.

When both ``RUNIT_USERNAME`` and ``RUNIT_PASSWORD`` are set, every request
must carry a matching ``Authorization: Basic …`` header. Otherwise the
request is answered with ``401 Unauthorized`` and a ``WWW-Authenticate``
challenge. With either credential missing, authentication is disabled and
all requests pass through.

Tags:
    runit, api, middleware, authentication, basic-auth

Doc-Types:
    api-reference
"""

from __future__ import annotations

import base64
import binascii
import secrets

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

REALM = "Restricted"


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Decode an ``Authorization`` header into ``(username, password)``.

    Returns ``None`` for a missing, non-Basic, or malformed header.
    """
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests without valid basic-auth credentials.

    Parameters
    ----------
    app:
        The ASGI application to wrap.
    username, password:
        Expected credentials. If either is empty or ``None`` enforcement is
        disabled.
    """

    def __init__(
        self,
        app: object,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._username = username
        self._password = password

    @property
    def enabled(self) -> bool:
        return bool(self._username) and bool(self._password)

    def _matches(self, credentials: tuple[str, str] | None) -> bool:
        if credentials is None:
            return False
        username, password = credentials
        # both halves are always compared
        user_ok = secrets.compare_digest(username.encode(), self._username.encode())
        pass_ok = secrets.compare_digest(password.encode(), self._password.encode())
        return user_ok and pass_ok

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.enabled:
            return await call_next(request)

        if not self._matches(parse_basic_auth(request.headers.get("Authorization"))):
            return PlainTextResponse(
                "Unauthorized\n",
                status_code=401,
                headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
            )

        return await call_next(request)
