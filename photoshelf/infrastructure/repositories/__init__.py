# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.

Usage:
    repo = UserRepository(db); repo.get_by_id(user_id)
"""
from .base import Repository, ConnectionProtocol, Page
from .user_repository import UserRepository
from .photo_repository import PhotoRepository, GalleryFilter
from .gallery_repository import GalleryRepository

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "Page",
    "UserRepository",
    "PhotoRepository",
    "GalleryFilter",
    "GalleryRepository",
]
