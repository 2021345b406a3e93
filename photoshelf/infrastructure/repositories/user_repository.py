"""User repository - handles all user-related database operations."""
from datetime import datetime, timezone

import bcrypt

from .base import Repository


class UserRepository(Repository):
    """Repository for user entity operations.

    Rows are returned as plain dicts, including ``password_hash`` and
    ``profile_picture_data``; callers decide what leaves the service.

    Examples:
        >>> repo = UserRepository(db)
        >>> user_id = repo.create("john", "john@example.com", "password123")
        >>> user = repo.get_by_username_or_email("john@example.com")
    """

    def get_by_id(self, user_id: int) -> dict | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User dict or None if not found
        """
        return self._fetchone("SELECT * FROM users WHERE id = ?", (user_id,))

    def get_by_username(self, username: str) -> dict | None:
        """Get user by exact username."""
        return self._fetchone("SELECT * FROM users WHERE username = ?", (username,))

    def get_by_email(self, email: str) -> dict | None:
        """Get user by exact email."""
        return self._fetchone("SELECT * FROM users WHERE email = ?", (email,))

    def get_by_username_or_email(self, login: str) -> dict | None:
        """Resolve a login identifier, trying username first, then email.

        Args:
            login: Username or email address

        Returns:
            User dict or None if neither matches
        """
        return self.get_by_username(login) or self.get_by_email(login)

    def exists_by_username(self, username: str) -> bool:
        cursor = self._execute("SELECT 1 FROM users WHERE username = ?", (username,))
        return cursor.fetchone() is not None

    def exists_by_email(self, email: str) -> bool:
        cursor = self._execute("SELECT 1 FROM users WHERE email = ?", (email,))
        return cursor.fetchone() is not None

    def create(self, username: str, email: str, password: str) -> int:
        """Create new user.

        Args:
            username: Unique username
            email: Unique email address
            password: Plain text password (will be hashed)

        Returns:
            New user ID

        Raises:
            sqlite3.IntegrityError: If username or email is already stored
        """
        now = datetime.now(timezone.utc)
        cursor = self._execute(
            """INSERT INTO users
               (username, email, password_hash, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (username, email, self._hash_password(password), now, now)
        )
        self._commit()
        return cursor.lastrowid

    def update_account(self, user_id: int, username: str, email: str) -> bool:
        """Update username and email.

        Returns:
            True if user existed and was updated
        """
        cursor = self._execute(
            "UPDATE users SET username = ?, email = ?, updated_at = ? WHERE id = ?",
            (username, email, datetime.now(timezone.utc), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def update_password(self, user_id: int, new_password: str) -> bool:
        """Update user password.

        Args:
            user_id: User ID
            new_password: New plain text password

        Returns:
            True if user existed and was updated
        """
        cursor = self._execute(
            "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
            (self._hash_password(new_password), datetime.now(timezone.utc), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def set_profile_picture(
        self,
        user_id: int,
        data: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> bool:
        """Replace the profile picture together with its metadata."""
        cursor = self._execute(
            """UPDATE users
               SET profile_picture_data = ?, profile_picture_filename = ?,
                   profile_picture_content_type = ?, profile_picture_size = ?,
                   updated_at = ?
               WHERE id = ?""",
            (data, filename, content_type, len(data), datetime.now(timezone.utc), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def clear_profile_picture(self, user_id: int) -> bool:
        """Remove the profile picture and its metadata."""
        cursor = self._execute(
            """UPDATE users
               SET profile_picture_data = NULL, profile_picture_filename = NULL,
                   profile_picture_content_type = NULL, profile_picture_size = NULL,
                   updated_at = ?
               WHERE id = ?""",
            (datetime.now(timezone.utc), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def authenticate(self, login: str, password: str) -> dict | None:
        """Authenticate user with username-or-email and password.

        Args:
            login: Username or email
            password: Plain text password

        Returns:
            User dict if authentication successful, None otherwise
        """
        user = self.get_by_username_or_email(login)
        if not user:
            return None

        if self._verify_password(password, user["password_hash"]):
            return user
        return None

    # Private helper methods

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        # bcrypt only uses the first 72 bytes; newer releases reject longer input
        return password.encode('utf-8')[:72]

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt."""
        hashed = bcrypt.hashpw(self._password_bytes(password), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against a stored bcrypt hash."""
        if not hashed.startswith(("$2b$", "$2a$", "$2y$")):
            return False
        return bcrypt.checkpw(self._password_bytes(password), hashed.encode('utf-8'))
