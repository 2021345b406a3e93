"""Photo routes - upload, listing, CRUD, metadata and download."""
from fastapi import APIRouter, Body, Depends, File, Form, Query, Response, UploadFile

from .. import config
from ..application.services import PhotoService
from ..dependencies import require_user_id
from ..infrastructure.repositories import GalleryFilter
from .deps import get_photo_service
from .files import binary_response, read_upload
from .schemas import PhotoMetadata, PhotoPage, PhotoSummary

router = APIRouter(prefix="/api/photos", tags=["photos"])


@router.get("", response_model=PhotoPage)
def list_photos(
    page: int = Query(0, ge=0),
    size: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    gallery_id: int | None = Query(None, alias="galleryId"),
    unorganized: bool = False,
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """List the user's photos.

    ``galleryId`` selects one gallery, ``unorganized=true`` selects photos
    without a gallery; with neither, all photos are listed.
    """
    if gallery_id is not None:
        gallery_filter = GalleryFilter.gallery(gallery_id)
    elif unorganized:
        gallery_filter = GalleryFilter.unorganized()
    else:
        gallery_filter = GalleryFilter.any()
    return PhotoPage.from_page(photo_service.list_photos(user_id, gallery_filter, page, size))


@router.post("", response_model=PhotoSummary)
async def create_photo(
    title: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(None, max_length=500),
    file: UploadFile = File(...),
    gallery_id: int | None = Form(None, alias="galleryId"),
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Upload a single photo."""
    upload = await read_upload(file)
    return photo_service.create_photo(user_id, title, description, upload, gallery_id)


@router.post("/bulk", response_model=list[PhotoSummary])
async def bulk_create_photos(
    files: list[UploadFile] = File(...),
    titles: list[str] | None = Form(None),
    descriptions: list[str] | None = Form(None),
    gallery_id: int | None = Form(None, alias="galleryId"),
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Upload several photos; titles default to the filenames."""
    uploads = [await read_upload(f) for f in files]
    return photo_service.bulk_create_photos(user_id, uploads, titles, descriptions, gallery_id)


@router.delete("/bulk", status_code=204)
def bulk_delete_photos(
    photo_ids: list[int] = Body(...),
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Delete several photos; nothing is deleted if any ID is invalid."""
    photo_service.bulk_delete_photos(photo_ids, user_id)
    return Response(status_code=204)


@router.get("/{photo_id}", response_model=PhotoSummary)
def get_photo(
    photo_id: int,
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    return photo_service.get_photo(photo_id, user_id)


@router.put("/{photo_id}", response_model=PhotoSummary)
async def update_photo(
    photo_id: int,
    title: str = Form(..., min_length=1, max_length=255),
    description: str | None = Form(None, max_length=500),
    file: UploadFile | None = File(None),
    gallery_id: int | None = Form(None, alias="galleryId"),
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Update a photo; the file is replaced only when a non-empty one is sent."""
    upload = await read_upload(file) if file is not None else None
    return photo_service.update_photo(photo_id, user_id, title, description, upload, gallery_id)


@router.delete("/{photo_id}", status_code=204)
def delete_photo(
    photo_id: int,
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    photo_service.delete_photo(photo_id, user_id)
    return Response(status_code=204)


@router.get("/{photo_id}/metadata", response_model=PhotoMetadata)
def get_metadata(
    photo_id: int,
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Get photo metadata without the image bytes."""
    return photo_service.get_metadata(photo_id, user_id)


@router.get("/{photo_id}/file")
def download(
    photo_id: int,
    user_id: int = Depends(require_user_id),
    photo_service: PhotoService = Depends(get_photo_service),
):
    """Download the raw image file."""
    data, content_type, filename = photo_service.download(photo_id, user_id)
    return binary_response(data, content_type, filename, "attachment")
