"""Gallery service - gallery management and photo organization.

Galleries are looked up by (id, owner): a gallery owned by someone else
is reported as not found, exactly like a missing one.
"""
import logging
import sqlite3

from ... import config
from ...database import Connection
from ...exceptions import (
    DuplicateGalleryNameError,
    GalleryNotFoundError,
    InvalidInputError,
    PhotoForbiddenError,
    PhotoNotFoundError,
)
from ...infrastructure.repositories import GalleryRepository, Page, PhotoRepository

logger = logging.getLogger(__name__)


class GalleryService:
    """Service for gallery operations.

    Responsibilities:
    - Gallery CRUD with per-user unique names
    - Preview photos and photo counts
    - Moving photos between galleries and unorganized
    - Deleting a gallery with or without its photos
    """

    def __init__(
        self,
        gallery_repository: GalleryRepository,
        photo_repository: PhotoRepository,
        db: Connection
    ):
        self.gallery_repo = gallery_repository
        self.photo_repo = photo_repository
        self.db = db

    def _get_owned(self, gallery_id: int, user_id: int) -> dict:
        gallery = self.gallery_repo.get_by_id_and_user(gallery_id, user_id)
        if not gallery:
            raise GalleryNotFoundError(gallery_id)
        return gallery

    def _with_photos(self, gallery: dict, limit: int | None) -> dict:
        gallery["preview_photos"] = self.photo_repo.list_by_gallery(gallery["id"], limit=limit)
        return gallery

    def create_gallery(self, name: str, description: str | None, user_id: int) -> dict:
        """Create a gallery.

        Raises:
            DuplicateGalleryNameError: User already has a gallery with this name
        """
        if self.gallery_repo.exists_by_name_and_user(name, user_id):
            raise DuplicateGalleryNameError(name)
        try:
            gallery_id = self.gallery_repo.create(name, description, user_id)
        except sqlite3.IntegrityError as e:
            raise DuplicateGalleryNameError(name) from e

        logger.info("User %s created gallery %s (%r)", user_id, gallery_id, name)
        return self.gallery_repo.get_by_id_and_user(gallery_id, user_id)

    def list_galleries(self, user_id: int) -> list[dict]:
        """List galleries newest first, each with up to four preview photos."""
        galleries = self.gallery_repo.list_by_user(user_id)
        return [self._with_photos(g, config.PREVIEW_PHOTO_COUNT) for g in galleries]

    def page_galleries(self, user_id: int, page: int, size: int) -> Page:
        """Page through galleries newest first, without previews."""
        return self.gallery_repo.page_by_user(user_id, page, size)

    def list_for_dropdown(self, user_id: int) -> list[dict]:
        """List galleries newest first, without previews."""
        return self.gallery_repo.list_by_user(user_id)

    def get_gallery(self, gallery_id: int, user_id: int) -> dict:
        """Get a gallery with all of its photos (oldest first).

        Raises:
            GalleryNotFoundError: Missing or owned by someone else
        """
        return self._with_photos(self._get_owned(gallery_id, user_id), limit=None)

    def get_preview(self, gallery_id: int, user_id: int) -> dict:
        """Get a gallery with its first four photos.

        Raises:
            GalleryNotFoundError: Missing or owned by someone else
        """
        return self._with_photos(self._get_owned(gallery_id, user_id), config.PREVIEW_PHOTO_COUNT)

    def update_gallery(
        self,
        gallery_id: int,
        user_id: int,
        name: str,
        description: str | None,
    ) -> dict:
        """Rename a gallery and replace its description.

        Keeping the current name is allowed.

        Raises:
            GalleryNotFoundError: Missing or owned by someone else
            DuplicateGalleryNameError: Another gallery of the user has this name
        """
        gallery = self._get_owned(gallery_id, user_id)
        if gallery["name"] != name and self.gallery_repo.exists_by_name_and_user(name, user_id):
            raise DuplicateGalleryNameError(name)
        try:
            self.gallery_repo.update(gallery_id, name, description)
        except sqlite3.IntegrityError as e:
            raise DuplicateGalleryNameError(name) from e
        return self.gallery_repo.get_by_id_and_user(gallery_id, user_id)

    def delete_gallery(self, gallery_id: int, user_id: int, delete_photos: bool = False) -> None:
        """Delete a gallery.

        With ``delete_photos`` its photos are deleted too; otherwise they
        become unorganized.

        Raises:
            GalleryNotFoundError: Missing or owned by someone else
        """
        self._get_owned(gallery_id, user_id)
        with self.db.atomic():
            if delete_photos:
                affected = self.photo_repo.delete_by_gallery(gallery_id)
            else:
                affected = self.photo_repo.detach_from_gallery(gallery_id)
            self.gallery_repo.delete(gallery_id)

        logger.info(
            "User %s deleted gallery %s (%d photos %s)",
            user_id, gallery_id, affected, "deleted" if delete_photos else "unorganized"
        )

    def move_photos(self, photo_ids: list[int], target_gallery_id: int | None, user_id: int) -> int:
        """Move photos into a gallery, or to unorganized when target is None.

        Returns:
            Number of photos moved

        Raises:
            InvalidInputError: Empty ID list
            PhotoNotFoundError: Any photo does not exist
            PhotoForbiddenError: Any photo belongs to another user
            GalleryNotFoundError: Target gallery missing or foreign
        """
        if not photo_ids:
            raise InvalidInputError("Photo IDs list cannot be empty")
        photo_ids = list(dict.fromkeys(photo_ids))

        photos = self.photo_repo.get_summaries_by_ids(photo_ids)
        for photo_id in photo_ids:
            photo = photos.get(photo_id)
            if not photo:
                raise PhotoNotFoundError(photo_id)
            if photo["user_id"] != user_id:
                raise PhotoForbiddenError(photo_id)

        if target_gallery_id is not None:
            if not self.gallery_repo.get_by_id_and_user(target_gallery_id, user_id):
                raise GalleryNotFoundError(target_gallery_id, "Target gallery not found")

        with self.db.atomic():
            moved = self.photo_repo.move_to_gallery(photo_ids, target_gallery_id)

        logger.info(
            "User %s moved %d photos to %s",
            user_id, moved,
            f"gallery {target_gallery_id}" if target_gallery_id is not None else "unorganized"
        )
        return moved
