"""Gallery repository - handles all gallery-related database operations.

Galleries are flat, per-user collections of photos. Listing queries
annotate every gallery with its live ``photo_count``.
"""
from datetime import datetime, timezone

from .base import Page, Repository

_SELECT_WITH_COUNT = """
    SELECT g.*,
           (SELECT COUNT(*) FROM photos p WHERE p.gallery_id = g.id) AS photo_count
    FROM galleries g
"""


class GalleryRepository(Repository):
    """Repository for gallery entity operations.

    Lookups are ownership-scoped: a gallery that exists but belongs to
    someone else is reported the same way as a missing one.

    Examples:
        >>> repo = GalleryRepository(db)
        >>> gallery_id = repo.create("Vacation", "Summer 2024", user_id)
        >>> repo.get_by_id_and_user(gallery_id, user_id)["photo_count"]
        0
    """

    def create(self, name: str, description: str | None, user_id: int) -> int:
        """Create a new gallery.

        Args:
            name: Gallery name (unique per user)
            description: Optional description
            user_id: Owner user ID

        Returns:
            New gallery ID

        Raises:
            sqlite3.IntegrityError: If the user already has a gallery with this name
        """
        now = datetime.now(timezone.utc)
        cursor = self._execute(
            """INSERT INTO galleries (name, description, user_id, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (name, description, user_id, now, now)
        )
        self._commit()
        return cursor.lastrowid

    def get_by_id_and_user(self, gallery_id: int, user_id: int) -> dict | None:
        """Get a gallery owned by the user, with its photo count.

        Args:
            gallery_id: Gallery ID
            user_id: Expected owner

        Returns:
            Gallery dict or None if missing or owned by someone else
        """
        return self._fetchone(
            _SELECT_WITH_COUNT + " WHERE g.id = ? AND g.user_id = ?",
            (gallery_id, user_id)
        )

    def exists_by_name_and_user(self, name: str, user_id: int) -> bool:
        cursor = self._execute(
            "SELECT 1 FROM galleries WHERE name = ? AND user_id = ?",
            (name, user_id)
        )
        return cursor.fetchone() is not None

    def list_by_user(self, user_id: int) -> list[dict]:
        """Get all galleries of a user, newest first."""
        return self._fetchall(
            _SELECT_WITH_COUNT + " WHERE g.user_id = ? ORDER BY g.created_at DESC, g.id DESC",
            (user_id,)
        )

    def page_by_user(self, user_id: int, page: int, size: int) -> Page:
        """Page through a user's galleries, newest first.

        Args:
            user_id: Owner user ID
            page: 0-based page number
            size: Page size
        """
        total = self._execute(
            "SELECT COUNT(*) FROM galleries WHERE user_id = ?",
            (user_id,)
        ).fetchone()[0]
        rows = self._fetchall(
            _SELECT_WITH_COUNT
            + " WHERE g.user_id = ? ORDER BY g.created_at DESC, g.id DESC LIMIT ? OFFSET ?",
            (user_id, size, page * size)
        )
        return Page(content=rows, total_elements=total, number=page, size=size)

    def update(self, gallery_id: int, name: str, description: str | None) -> bool:
        """Update gallery name and description.

        Returns:
            True if gallery existed and was updated
        """
        cursor = self._execute(
            "UPDATE galleries SET name = ?, description = ?, updated_at = ? WHERE id = ?",
            (name, description, datetime.now(timezone.utc), gallery_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, gallery_id: int) -> bool:
        """Delete the gallery row only; photo disposition is the caller's job."""
        cursor = self._execute("DELETE FROM galleries WHERE id = ?", (gallery_id,))
        self._commit()
        return cursor.rowcount > 0
