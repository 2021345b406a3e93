"""Photo repository - handles all photo-related database operations.

Photos carry their raw bytes in the ``data`` column. Listing queries
select ``SUMMARY_COLUMNS`` only, so image bytes are read solely by
``get_by_id`` (and the download path built on it).
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from .base import Page, Repository

SUMMARY_COLUMNS = (
    "id, title, description, original_filename, content_type, size, "
    "user_id, gallery_id, created_at"
)


@dataclass(frozen=True)
class GalleryFilter:
    """Selects a user's photos by gallery membership.

    Three states: every photo (``any()``), photos of one gallery
    (``gallery(id)``) and photos without a gallery (``unorganized()``).
    """

    mode: str
    gallery_id: int | None = None

    ANY = "any"
    GALLERY = "gallery"
    UNORGANIZED = "unorganized"

    @classmethod
    def any(cls) -> "GalleryFilter":
        return cls(cls.ANY)

    @classmethod
    def gallery(cls, gallery_id: int) -> "GalleryFilter":
        return cls(cls.GALLERY, gallery_id)

    @classmethod
    def unorganized(cls) -> "GalleryFilter":
        return cls(cls.UNORGANIZED)

    def to_sql(self) -> tuple[str, tuple]:
        """Return the extra WHERE fragment and its parameters."""
        if self.mode == self.GALLERY:
            return " AND gallery_id = ?", (self.gallery_id,)
        if self.mode == self.UNORGANIZED:
            return " AND gallery_id IS NULL", ()
        return "", ()


class PhotoRepository(Repository):
    """Repository for photo entity operations.

    Examples:
        >>> repo = PhotoRepository(db)
        >>> photo_id = repo.create(user_id, "Sunset", None, "sunset.jpg", "image/jpeg", data)
        >>> page = repo.list_by_user(user_id, GalleryFilter.unorganized(), page=0, size=10)
    """

    def create(
        self,
        user_id: int,
        title: str,
        description: str | None,
        original_filename: str | None,
        content_type: str,
        data: bytes,
        gallery_id: int | None = None,
    ) -> int:
        """Create a photo record.

        Args:
            user_id: Owner user ID
            title: Photo title
            description: Optional description
            original_filename: Client-provided filename
            content_type: MIME type
            data: Raw image bytes
            gallery_id: Optional gallery ID (None for unorganized)

        Returns:
            New photo ID
        """
        cursor = self._execute(
            """INSERT INTO photos
               (title, description, original_filename, content_type, size, data,
                user_id, gallery_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (title, description, original_filename, content_type, len(data), data,
             user_id, gallery_id, datetime.now(timezone.utc))
        )
        self._commit()
        return cursor.lastrowid

    def get_by_id(self, photo_id: int) -> dict | None:
        """Get photo by ID, including image bytes."""
        return self._fetchone("SELECT * FROM photos WHERE id = ?", (photo_id,))

    def get_summary(self, photo_id: int) -> dict | None:
        """Get photo by ID without image bytes."""
        return self._fetchone(
            f"SELECT {SUMMARY_COLUMNS} FROM photos WHERE id = ?",
            (photo_id,)
        )

    def get_summaries_by_ids(self, photo_ids: list[int]) -> dict[int, dict]:
        """Get photos (without bytes) keyed by ID; missing IDs are absent."""
        if not photo_ids:
            return {}
        rows = self._fetchall(
            f"SELECT {SUMMARY_COLUMNS} FROM photos WHERE id IN ({self._placeholders(photo_ids)})",
            tuple(photo_ids)
        )
        return {row["id"]: row for row in rows}

    def list_by_user(
        self,
        user_id: int,
        gallery_filter: GalleryFilter,
        page: int,
        size: int,
    ) -> Page:
        """Page through a user's photos, ordered by ID.

        Args:
            user_id: Owner user ID
            gallery_filter: Gallery membership filter
            page: 0-based page number
            size: Page size

        Returns:
            Page of photo summary dicts
        """
        clause, params = gallery_filter.to_sql()
        total = self._execute(
            f"SELECT COUNT(*) FROM photos WHERE user_id = ?{clause}",
            (user_id, *params)
        ).fetchone()[0]
        rows = self._fetchall(
            f"""SELECT {SUMMARY_COLUMNS} FROM photos
                WHERE user_id = ?{clause}
                ORDER BY id
                LIMIT ? OFFSET ?""",
            (user_id, *params, size, page * size)
        )
        return Page(content=rows, total_elements=total, number=page, size=size)

    def list_by_gallery(self, gallery_id: int, limit: int | None = None) -> list[dict]:
        """Get photos of a gallery ordered by ascending ID (oldest first).

        Args:
            gallery_id: Gallery ID
            limit: Maximum number of photos (None for all)
        """
        if limit is None:
            return self._fetchall(
                f"SELECT {SUMMARY_COLUMNS} FROM photos WHERE gallery_id = ? ORDER BY id",
                (gallery_id,)
            )
        return self._fetchall(
            f"SELECT {SUMMARY_COLUMNS} FROM photos WHERE gallery_id = ? ORDER BY id LIMIT ?",
            (gallery_id, limit)
        )

    def update_details(self, photo_id: int, title: str, description: str | None) -> bool:
        """Replace title and description."""
        cursor = self._execute(
            "UPDATE photos SET title = ?, description = ? WHERE id = ?",
            (title, description, photo_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def replace_file(
        self,
        photo_id: int,
        data: bytes,
        original_filename: str | None,
        content_type: str,
    ) -> bool:
        """Replace the stored image bytes and their metadata."""
        cursor = self._execute(
            """UPDATE photos
               SET data = ?, original_filename = ?, content_type = ?, size = ?
               WHERE id = ?""",
            (data, original_filename, content_type, len(data), photo_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def move_to_gallery(self, photo_ids: list[int], gallery_id: int | None) -> int:
        """Assign photos to a gallery (None moves them to unorganized).

        Returns:
            Number of photos updated
        """
        if not photo_ids:
            return 0
        cursor = self._execute(
            f"UPDATE photos SET gallery_id = ? WHERE id IN ({self._placeholders(photo_ids)})",
            (gallery_id, *photo_ids)
        )
        self._commit()
        return cursor.rowcount

    def detach_from_gallery(self, gallery_id: int) -> int:
        """Move every photo of a gallery to unorganized."""
        cursor = self._execute(
            "UPDATE photos SET gallery_id = NULL WHERE gallery_id = ?",
            (gallery_id,)
        )
        self._commit()
        return cursor.rowcount

    def delete(self, photo_id: int) -> bool:
        cursor = self._execute("DELETE FROM photos WHERE id = ?", (photo_id,))
        self._commit()
        return cursor.rowcount > 0

    def delete_many(self, photo_ids: list[int]) -> int:
        """Delete photos by ID.

        Returns:
            Number of photos deleted
        """
        if not photo_ids:
            return 0
        cursor = self._execute(
            f"DELETE FROM photos WHERE id IN ({self._placeholders(photo_ids)})",
            tuple(photo_ids)
        )
        self._commit()
        return cursor.rowcount

    def delete_by_gallery(self, gallery_id: int) -> int:
        """Delete every photo of a gallery."""
        cursor = self._execute("DELETE FROM photos WHERE gallery_id = ?", (gallery_id,))
        self._commit()
        return cursor.rowcount
