"""Photo service - handles photo upload, retrieval and deletion.

Every photo operation is scoped to the requesting user: a photo that
exists but belongs to someone else raises ``PhotoForbiddenError``.
"""
import logging

from ...database import Connection
from ...exceptions import (
    GalleryNotFoundError,
    InvalidInputError,
    NotFoundError,
    PhotoForbiddenError,
    PhotoNotFoundError,
)
from ...infrastructure.repositories import (
    GalleryFilter,
    GalleryRepository,
    Page,
    PhotoRepository,
)
from .files import UploadedFile, title_from_filename, validate_image

logger = logging.getLogger(__name__)


def _require_title(title: str | None) -> str:
    """Strip a title; blank ones are rejected."""
    if title is None or not title.strip():
        raise InvalidInputError("Title must not be blank")
    return title.strip()


class PhotoService:
    """Service for photo operations.

    Responsibilities:
    - Single and bulk upload with file validation
    - Ownership-checked get/update/delete
    - Paged listing by gallery membership
    - Metadata and download
    """

    def __init__(
        self,
        photo_repository: PhotoRepository,
        gallery_repository: GalleryRepository,
        db: Connection
    ):
        self.photo_repo = photo_repository
        self.gallery_repo = gallery_repository
        self.db = db

    # === Lookup ===

    def _get_owned(self, photo_id: int, user_id: int, with_data: bool = False) -> dict:
        """Fetch a photo and check that the user owns it."""
        if with_data:
            photo = self.photo_repo.get_by_id(photo_id)
        else:
            photo = self.photo_repo.get_summary(photo_id)
        if not photo:
            raise PhotoNotFoundError(photo_id)
        if photo["user_id"] != user_id:
            raise PhotoForbiddenError(photo_id)
        return photo

    def _check_gallery(self, gallery_id: int | None, user_id: int) -> None:
        """Ensure an optional target gallery is owned by the user."""
        if gallery_id is None:
            return
        if not self.gallery_repo.get_by_id_and_user(gallery_id, user_id):
            raise GalleryNotFoundError(gallery_id)

    def get_photo(self, photo_id: int, user_id: int) -> dict:
        """Get a photo (without bytes).

        Raises:
            PhotoNotFoundError: Photo does not exist
            PhotoForbiddenError: Photo belongs to another user
        """
        return self._get_owned(photo_id, user_id)

    def list_photos(
        self,
        user_id: int,
        gallery_filter: GalleryFilter,
        page: int,
        size: int,
    ) -> Page:
        """List a user's photos, ordered by ID.

        Args:
            user_id: Owner user ID
            gallery_filter: Any / one gallery / unorganized
            page: 0-based page number
            size: Page size
        """
        return self.photo_repo.list_by_user(user_id, gallery_filter, page, size)

    # === Upload ===

    def create_photo(
        self,
        user_id: int,
        title: str,
        description: str | None,
        file: UploadedFile,
        gallery_id: int | None = None,
    ) -> dict:
        """Store a single photo.

        Raises:
            InvalidInputError: Blank title, file too large or not an image
            GalleryNotFoundError: Target gallery missing or foreign
        """
        title = _require_title(title)
        validate_image(file)
        self._check_gallery(gallery_id, user_id)

        photo_id = self.photo_repo.create(
            user_id=user_id,
            title=title,
            description=description,
            original_filename=file.filename,
            content_type=file.content_type,
            data=file.data,
            gallery_id=gallery_id,
        )
        logger.info("User %s uploaded photo %s (%s bytes)", user_id, photo_id, file.size)
        return self.photo_repo.get_summary(photo_id)

    def bulk_create_photos(
        self,
        user_id: int,
        files: list[UploadedFile],
        titles: list[str | None] | None = None,
        descriptions: list[str | None] | None = None,
        gallery_id: int | None = None,
    ) -> list[dict]:
        """Store several photos at once.

        ``titles[i]`` is used when present and non-blank, otherwise the
        title comes from the filename. Every file is validated before the
        first insert and the inserts share one transaction, so a bad file
        stores nothing.

        Returns:
            Created photo dicts in upload order

        Raises:
            InvalidInputError: No files, or any file too large / not an image
            GalleryNotFoundError: Target gallery missing or foreign
        """
        if not files:
            raise InvalidInputError("At least one file must be provided")
        titles = titles or []
        descriptions = descriptions or []

        for file in files:
            validate_image(file)
        self._check_gallery(gallery_id, user_id)

        photo_ids = []
        with self.db.atomic():
            for i, file in enumerate(files):
                title = titles[i] if i < len(titles) else None
                if title and title.strip():
                    title = title.strip()
                else:
                    title = title_from_filename(file.filename)
                description = descriptions[i] if i < len(descriptions) else None

                photo_ids.append(self.photo_repo.create(
                    user_id=user_id,
                    title=title,
                    description=description,
                    original_filename=file.filename,
                    content_type=file.content_type,
                    data=file.data,
                    gallery_id=gallery_id,
                ))

        logger.info("User %s bulk-uploaded %d photos", user_id, len(photo_ids))
        summaries = self.photo_repo.get_summaries_by_ids(photo_ids)
        return [summaries[photo_id] for photo_id in photo_ids]

    # === Modify ===

    def update_photo(
        self,
        photo_id: int,
        user_id: int,
        title: str,
        description: str | None,
        file: UploadedFile | None = None,
        gallery_id: int | None = None,
    ) -> dict:
        """Update title/description and optionally the file and gallery.

        Title and description are always replaced. The stored file changes
        only for a non-empty upload; the gallery only when ``gallery_id``
        is given.

        Raises:
            PhotoNotFoundError: Photo does not exist
            PhotoForbiddenError: Photo belongs to another user
            InvalidInputError: Blank title, replacement file too large or not an image
            GalleryNotFoundError: Target gallery missing or foreign
        """
        self._get_owned(photo_id, user_id)
        title = _require_title(title)
        replace_file = file is not None and not file.is_empty
        if replace_file:
            validate_image(file)
        self._check_gallery(gallery_id, user_id)

        with self.db.atomic():
            self.photo_repo.update_details(photo_id, title, description)
            if replace_file:
                self.photo_repo.replace_file(photo_id, file.data, file.filename, file.content_type)
            if gallery_id is not None:
                self.photo_repo.move_to_gallery([photo_id], gallery_id)

        return self.photo_repo.get_summary(photo_id)

    def delete_photo(self, photo_id: int, user_id: int) -> None:
        """Delete a photo.

        Raises:
            PhotoNotFoundError: Photo does not exist
            PhotoForbiddenError: Photo belongs to another user
        """
        self._get_owned(photo_id, user_id)
        self.photo_repo.delete(photo_id)
        logger.info("User %s deleted photo %s", user_id, photo_id)

    def bulk_delete_photos(self, photo_ids: list[int], user_id: int) -> int:
        """Delete several photos; nothing is deleted unless all are valid.

        Returns:
            Number of photos deleted

        Raises:
            PhotoNotFoundError: Any ID does not exist
            PhotoForbiddenError: Any photo belongs to another user
        """
        photo_ids = list(dict.fromkeys(photo_ids))
        photos = self.photo_repo.get_summaries_by_ids(photo_ids)
        for photo_id in photo_ids:
            photo = photos.get(photo_id)
            if not photo:
                raise PhotoNotFoundError(photo_id)
            if photo["user_id"] != user_id:
                raise PhotoForbiddenError(photo_id)

        with self.db.atomic():
            deleted = self.photo_repo.delete_many(photo_ids)
        logger.info("User %s bulk-deleted %d photos", user_id, deleted)
        return deleted

    # === Read-only views ===

    def get_metadata(self, photo_id: int, user_id: int) -> dict:
        """Get descriptive fields of a photo, never its bytes."""
        photo = self._get_owned(photo_id, user_id)
        return {
            "id": photo["id"],
            "title": photo["title"],
            "description": photo["description"],
            "original_filename": photo["original_filename"],
            "content_type": photo["content_type"],
            "size": photo["size"],
        }

    def download(self, photo_id: int, user_id: int) -> tuple[bytes, str, str]:
        """Get image bytes for download.

        Returns:
            Tuple of (data, content_type, filename)

        Raises:
            PhotoNotFoundError: Photo does not exist
            PhotoForbiddenError: Photo belongs to another user
            NotFoundError: Photo has no stored bytes
        """
        photo = self._get_owned(photo_id, user_id, with_data=True)
        if not photo["data"]:
            raise NotFoundError(f"Image data not found for photo with ID {photo_id}")
        content_type = photo["content_type"] or "application/octet-stream"
        filename = photo["original_filename"] or f"photo-{photo_id}"
        return photo["data"], content_type, filename
