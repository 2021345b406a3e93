# =============================================================================
# photoshelf/exceptions.py - Error taxonomy and handlers
# =============================================================================
# Services raise these typed errors; the handlers below turn them into
# JSON responses with the matching status code.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PhotoshelfError(Exception):
    """
    Base exception for the Photoshelf API.

    Carries a human-readable message, a machine-readable code and the
    HTTP status the boundary layer should answer with.
    """

    status_code = 500
    code = "PHOTOSHELF_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Error kinds
# =============================================================================

class NotFoundError(PhotoshelfError):
    """Resource does not exist (or is not visible to the caller)."""
    status_code = 404
    code = "NOT_FOUND"


class ForbiddenError(PhotoshelfError):
    """Resource exists but belongs to another user."""
    status_code = 403
    code = "FORBIDDEN"


class ConflictError(PhotoshelfError):
    """Uniqueness rule violated."""
    status_code = 400
    code = "CONFLICT"


class InvalidInputError(PhotoshelfError):
    """Bad file type/size or missing required value."""
    status_code = 400
    code = "INVALID_INPUT"


class UnauthorizedError(PhotoshelfError):
    """Missing, invalid or expired credentials."""
    status_code = 401
    code = "UNAUTHORIZED"


class InternalFailureError(PhotoshelfError):
    """Unexpected storage or I/O failure."""
    status_code = 500
    code = "INTERNAL_FAILURE"


# =============================================================================
# Users
# =============================================================================

class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__("User not found", details={"user_id": user_id})


class UsernameTakenError(ConflictError):
    code = "USERNAME_TAKEN"

    def __init__(self, username: str):
        super().__init__("Username is already taken!", details={"username": username})


class EmailTakenError(ConflictError):
    code = "EMAIL_TAKEN"

    def __init__(self, email: str):
        super().__init__("Email is already in use!", details={"email": email})


class InvalidCredentialsError(UnauthorizedError):
    code = "INVALID_CREDENTIALS"

    def __init__(self):
        super().__init__("Invalid username/email or password")


# =============================================================================
# Tokens
# =============================================================================

class TokenError(UnauthorizedError):
    """Token could not be resolved to a principal."""
    code = "INVALID_TOKEN"


class TokenExpiredError(TokenError):
    code = "TOKEN_EXPIRED"

    def __init__(self):
        super().__init__("Token has expired")


class TokenMalformedError(TokenError):
    code = "TOKEN_MALFORMED"

    def __init__(self, reason: str = "Malformed token"):
        super().__init__(reason)


class TokenSignatureError(TokenError):
    code = "TOKEN_BAD_SIGNATURE"

    def __init__(self):
        super().__init__("Invalid token signature")


class TokenUnsupportedError(TokenError):
    code = "TOKEN_UNSUPPORTED"

    def __init__(self, algorithm: str | None):
        super().__init__(f"Unsupported token algorithm: {algorithm}")


# =============================================================================
# Photos and galleries
# =============================================================================

class PhotoNotFoundError(NotFoundError):
    code = "PHOTO_NOT_FOUND"

    def __init__(self, photo_id: int, message: str | None = None):
        super().__init__(
            message or f"Photo with ID {photo_id} not found",
            details={"photo_id": photo_id},
        )


class PhotoForbiddenError(ForbiddenError):
    code = "PHOTO_FORBIDDEN"

    def __init__(self, photo_id: int):
        super().__init__("Photo does not belong to user", details={"photo_id": photo_id})


class GalleryNotFoundError(NotFoundError):
    code = "GALLERY_NOT_FOUND"

    def __init__(self, gallery_id: int, message: str = "Gallery not found"):
        super().__init__(message, details={"gallery_id": gallery_id})


class DuplicateGalleryNameError(ConflictError):
    code = "DUPLICATE_GALLERY_NAME"

    def __init__(self, name: str):
        super().__init__("Gallery with this name already exists", details={"name": name})


# =============================================================================
# Exception Handlers
# =============================================================================

async def photoshelf_exception_handler(request: Request, exc: PhotoshelfError) -> JSONResponse:
    """Convert PhotoshelfError to JSON response."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def storage_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected storage errors become a 500 INTERNAL_FAILURE."""
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal storage failure", "code": InternalFailureError.code},
    )
