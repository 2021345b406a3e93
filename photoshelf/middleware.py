"""Application middleware."""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .exceptions import TokenError
from .infrastructure.security import TokenProvider

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _unauthorized(content: dict) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=content,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware to check bearer tokens on all non-public routes.

    A valid token puts its user ID on ``request.state.user_id``; anything
    else is answered with 401 before a route runs.
    """

    def __init__(self, app, token_provider: TokenProvider | None = None):
        super().__init__(app)
        self._token_provider = token_provider

    @property
    def token_provider(self) -> TokenProvider:
        if self._token_provider is None:
            self._token_provider = TokenProvider.from_config()
        return self._token_provider

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"

        # Allow public paths (with or without a trailing slash)
        if path in config.PUBLIC_PATHS:
            return await call_next(request)

        header = request.headers.get("Authorization", "")
        if not header.startswith(BEARER_PREFIX):
            return _unauthorized({"detail": "Not authenticated", "code": "UNAUTHORIZED"})

        try:
            user_id = self.token_provider.validate_token(header[len(BEARER_PREFIX):].strip())
        except TokenError as e:
            return _unauthorized(e.to_dict())

        request.state.user_id = user_id
        return await call_next(request)
