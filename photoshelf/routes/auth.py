"""Authentication routes - signup, signin and profile."""
from fastapi import APIRouter, Depends, Form, Request
from pydantic import EmailStr
from starlette.datastructures import UploadFile

from ..application.services import AuthService, UploadedFile, UserService
from ..dependencies import require_user_id
from .deps import get_auth_service, get_user_service
from .files import binary_response, read_upload
from .schemas import (
    MessageResponse,
    ProfileUpdateResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserProfile,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=MessageResponse)
def signup(data: SignupRequest, user_service: UserService = Depends(get_user_service)):
    """Register a new user."""
    user_service.register(data.username, data.email, data.password)
    return MessageResponse(message="User registered successfully")


@router.post("/signin", response_model=TokenResponse)
def signin(data: SigninRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Authenticate with username or email and return an access token."""
    token = auth_service.authenticate(data.username_or_email, data.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserProfile)
def me(
    user_id: int = Depends(require_user_id),
    user_service: UserService = Depends(get_user_service),
):
    """Get the authenticated user's profile."""
    return UserProfile.from_user(user_service.get_current_user(user_id))


@router.get("/profile-picture")
def profile_picture(
    user_id: int = Depends(require_user_id),
    user_service: UserService = Depends(get_user_service),
):
    """Get the authenticated user's profile picture."""
    data, content_type, filename = user_service.get_profile_picture(user_id)
    return binary_response(data, content_type, filename, "inline")


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    request: Request,
    username: str = Form(..., min_length=3, max_length=50),
    email: EmailStr = Form(...),
    password: str | None = Form(None),
    user_id: int = Depends(require_user_id),
    user_service: UserService = Depends(get_user_service),
):
    """Update username, email, password and profile picture.

    Omitting ``profilePicture`` removes the current picture; sending an
    empty file keeps it.
    """
    picture = await _read_profile_picture(request)
    user = user_service.update_profile(user_id, username, email, password, picture)

    if picture is None:
        message = "Profile updated successfully (profile picture removed)"
    elif picture.is_empty:
        message = "Profile updated successfully (no profile picture changes)"
    else:
        message = (
            f"Profile updated successfully with new profile picture: {picture.filename} "
            f"({picture.size} bytes, {picture.content_type})"
        )
    return ProfileUpdateResponse(message=message, user=UserProfile.from_user(user))


async def _read_profile_picture(request: Request) -> UploadedFile | None:
    """Pick the ``profilePicture`` part out of the submitted form.

    A missing part yields None. A part without a filename arrives as a
    plain (empty) field and counts as an empty upload.
    """
    form = await request.form()
    if "profilePicture" not in form:
        return None
    value = form["profilePicture"]
    if isinstance(value, UploadFile):
        return await read_upload(value)
    return UploadedFile(b"")
