"""Accept-Language detection middleware."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fatoora.app.core.i18n import preferred_language


class LanguageMiddleware(BaseHTTPMiddleware):
    """Store the caller's language on ``request.state.language``.

    Error messages are returned in that language and it is echoed back via
    the ``Content-Language`` response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.language = preferred_language(
            request.headers.get("Accept-Language", "")
        )
        response = await call_next(request)
        response.headers["Content-Language"] = request.state.language
        return response
