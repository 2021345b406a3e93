"""Application services - business logic layer."""

from .files import UploadedFile
from .auth_service import AuthService
from .user_service import UserService
from .photo_service import PhotoService
from .gallery_service import GalleryService

__all__ = [
    "UploadedFile",
    "AuthService",
    "UserService",
    "PhotoService",
    "GalleryService",
]
