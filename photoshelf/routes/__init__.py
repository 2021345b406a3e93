"""API routes package.

- auth: signup, signin and profile
- photos: photo upload and CRUD
- galleries: gallery management and photo moves
- health: liveness probe
"""
from fastapi import APIRouter

from . import auth, photos, galleries, health

# Create main router with all routes
router = APIRouter()

router.include_router(auth.router)
router.include_router(photos.router)
router.include_router(galleries.router)
router.include_router(health.router)

__all__ = ["router"]
