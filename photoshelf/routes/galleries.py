"""Gallery routes - gallery CRUD and moving photos between galleries."""
from fastapi import APIRouter, Depends, Query, Response

from .. import config
from ..application.services import GalleryService
from ..dependencies import require_user_id
from .deps import get_gallery_service
from .schemas import GalleryPage, GalleryRequest, GalleryResponse, MessageResponse, MovePhotosRequest

router = APIRouter(prefix="/api/galleries", tags=["galleries"])


@router.post("", response_model=GalleryResponse)
def create_gallery(
    data: GalleryRequest,
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    return gallery_service.create_gallery(data.name, data.description, user_id)


@router.get("", response_model=list[GalleryResponse])
def list_galleries(
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    """List galleries newest first, with photo counts and preview photos."""
    return gallery_service.list_galleries(user_id)


@router.get("/page", response_model=GalleryPage)
def page_galleries(
    page: int = Query(0, ge=0),
    size: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    return GalleryPage.from_page(gallery_service.page_galleries(user_id, page, size))


@router.get("/dropdown", response_model=list[GalleryResponse])
def dropdown_galleries(
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    """List galleries for selection menus (no previews)."""
    return gallery_service.list_for_dropdown(user_id)


@router.post("/move-photos", response_model=MessageResponse)
def move_photos(
    data: MovePhotosRequest,
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    """Move photos to a gallery, or to unorganized when no target is given."""
    moved = gallery_service.move_photos(data.photo_ids, data.target_gallery_id, user_id)
    return MessageResponse(message=f"Moved {moved} photos")


@router.get("/{gallery_id}", response_model=GalleryResponse)
def get_gallery(
    gallery_id: int,
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    """Get a gallery with all of its photos."""
    return gallery_service.get_gallery(gallery_id, user_id)


@router.get("/{gallery_id}/preview", response_model=GalleryResponse)
def get_gallery_preview(
    gallery_id: int,
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    return gallery_service.get_preview(gallery_id, user_id)


@router.put("/{gallery_id}", response_model=GalleryResponse)
def update_gallery(
    gallery_id: int,
    data: GalleryRequest,
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    return gallery_service.update_gallery(gallery_id, user_id, data.name, data.description)


@router.delete("/{gallery_id}", status_code=204)
def delete_gallery(
    gallery_id: int,
    delete_photos: bool = Query(False, alias="deletePhotos"),
    user_id: int = Depends(require_user_id),
    gallery_service: GalleryService = Depends(get_gallery_service),
):
    """Delete a gallery; its photos are deleted or become unorganized."""
    gallery_service.delete_gallery(gallery_id, user_id, delete_photos)
    return Response(status_code=204)
