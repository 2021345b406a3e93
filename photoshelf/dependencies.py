"""Shared FastAPI dependencies."""
from typing import Iterator

from fastapi import Request

from .database import Connection, create_connection
from .exceptions import UnauthorizedError


def get_db() -> Iterator[Connection]:
    """Open a connection for the duration of one request."""
    db = create_connection()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(request: Request) -> int | None:
    """Get the authenticated user ID from request state."""
    return getattr(request.state, "user_id", None)


def require_user_id(request: Request) -> int:
    """Require an authenticated user, raise 401 if not authenticated."""
    user_id = get_current_user_id(request)
    if user_id is None:
        raise UnauthorizedError("Not authenticated")
    return user_id
