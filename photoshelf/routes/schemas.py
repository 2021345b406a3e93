"""Request and response models.

Fields are snake_case in Python and camelCase on the wire.
"""
from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

from ..infrastructure.repositories import Page


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Auth
# =============================================================================

class SignupRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr = Field(max_length=100)
    password: str = Field(min_length=6, max_length=120)


class SigninRequest(CamelModel):
    username_or_email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "Bearer"


class MessageResponse(CamelModel):
    message: str


class UserProfile(CamelModel):
    id: int
    username: str
    email: str
    has_profile_picture: bool
    profile_picture_filename: str | None = None
    profile_picture_content_type: str | None = None
    profile_picture_size: int | None = None

    @classmethod
    def from_user(cls, user: dict) -> "UserProfile":
        return cls(
            id=user["id"],
            username=user["username"],
            email=user["email"],
            has_profile_picture=bool(user["profile_picture_data"]),
            profile_picture_filename=user["profile_picture_filename"],
            profile_picture_content_type=user["profile_picture_content_type"],
            profile_picture_size=user["profile_picture_size"],
        )


class ProfileUpdateResponse(CamelModel):
    message: str
    user: UserProfile


# =============================================================================
# Photos
# =============================================================================

class PhotoSummary(CamelModel):
    id: int
    title: str
    description: str | None = None
    original_filename: str | None = None
    content_type: str | None = None
    size: int | None = None
    user_id: int
    gallery_id: int | None = None


class PhotoMetadata(CamelModel):
    id: int
    title: str
    description: str | None = None
    original_filename: str | None = None
    content_type: str | None = None
    size: int | None = None


class PageResponse(CamelModel):
    total_elements: int
    total_pages: int
    size: int
    number: int
    first: bool
    last: bool
    number_of_elements: int


class PhotoPage(PageResponse):
    content: list[PhotoSummary]

    @classmethod
    def from_page(cls, page: Page) -> "PhotoPage":
        return cls.model_validate(asdict(page))


# =============================================================================
# Galleries
# =============================================================================

GalleryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class GalleryRequest(CamelModel):
    name: GalleryName
    description: str | None = Field(default=None, max_length=500)


class GalleryResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    user_id: int
    photo_count: int = 0
    created_at: datetime
    updated_at: datetime
    preview_photos: list[PhotoSummary] | None = None


class GalleryPage(PageResponse):
    content: list[GalleryResponse]

    @classmethod
    def from_page(cls, page: Page) -> "GalleryPage":
        return cls.model_validate(asdict(page))


class MovePhotosRequest(CamelModel):
    photo_ids: list[int]
    target_gallery_id: int | None = None
