"""Shared dependencies for API routes.

Factory functions that build services over the request's connection.
"""
from fastapi import Depends

from ..application.services import AuthService, GalleryService, PhotoService, UserService
from ..database import Connection
from ..dependencies import get_db
from ..infrastructure.repositories import GalleryRepository, PhotoRepository, UserRepository
from ..infrastructure.security import TokenProvider


def get_token_provider() -> TokenProvider:
    """Create TokenProvider from configuration."""
    return TokenProvider.from_config()


def get_auth_service(
    db: Connection = Depends(get_db),
    token_provider: TokenProvider = Depends(get_token_provider),
) -> AuthService:
    """Create AuthService with repositories."""
    return AuthService(
        user_repository=UserRepository(db),
        token_provider=token_provider
    )


def get_user_service(db: Connection = Depends(get_db)) -> UserService:
    """Create UserService with repositories."""
    return UserService(user_repository=UserRepository(db), db=db)


def get_photo_service(db: Connection = Depends(get_db)) -> PhotoService:
    """Create PhotoService with repositories."""
    return PhotoService(
        photo_repository=PhotoRepository(db),
        gallery_repository=GalleryRepository(db),
        db=db
    )


def get_gallery_service(db: Connection = Depends(get_db)) -> GalleryService:
    """Create GalleryService with repositories."""
    return GalleryService(
        gallery_repository=GalleryRepository(db),
        photo_repository=PhotoRepository(db),
        db=db
    )
