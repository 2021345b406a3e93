"""User service - registration and profile management."""
import logging
import sqlite3

from ...database import Connection
from ...exceptions import (
    EmailTakenError,
    InvalidInputError,
    NotFoundError,
    UsernameTakenError,
    UserNotFoundError,
)
from ...infrastructure.repositories import UserRepository
from .files import UploadedFile

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_UPDATED_PASSWORD_LENGTH = 100


def _conflict_from_integrity_error(e: sqlite3.IntegrityError, username: str, email: str):
    """Map a UNIQUE violation on users to the matching conflict error."""
    message = str(e)
    if "users.username" in message:
        return UsernameTakenError(username)
    if "users.email" in message:
        return EmailTakenError(email)
    return None


class UserService:
    """Service for user accounts.

    Responsibilities:
    - Registration with username/email uniqueness
    - Current-user lookup
    - Profile updates (credentials and profile picture)
    """

    def __init__(self, user_repository: UserRepository, db: Connection):
        self.user_repo = user_repository
        self.db = db

    def register(self, username: str, email: str, password: str) -> dict:
        """Register a new user.

        Args:
            username: Desired username
            email: Email address
            password: Plain text password

        Returns:
            Created user dict

        Raises:
            UsernameTakenError: Username already registered
            EmailTakenError: Email already registered
        """
        if self.user_repo.exists_by_username(username):
            raise UsernameTakenError(username)
        if self.user_repo.exists_by_email(email):
            raise EmailTakenError(email)

        try:
            user_id = self.user_repo.create(username, email, password)
        except sqlite3.IntegrityError as e:
            conflict = _conflict_from_integrity_error(e, username, email)
            if conflict is None:
                raise
            raise conflict from e

        logger.info("Registered user %s (id=%s)", username, user_id)
        return self.user_repo.get_by_id(user_id)

    def get_current_user(self, user_id: int) -> dict:
        """Get the authenticated user.

        Raises:
            UserNotFoundError: Token refers to a user that no longer exists
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def update_profile(
        self,
        user_id: int,
        username: str,
        email: str,
        password: str | None = None,
        profile_picture: UploadedFile | None = None,
    ) -> dict:
        """Update account fields and the profile picture.

        Keeping one's own username or email is not a conflict. The password
        is re-hashed only when non-blank. For the picture, ``None`` removes
        it, an empty upload leaves it unchanged and anything else replaces it.

        Returns:
            Updated user dict

        Raises:
            UserNotFoundError: User does not exist
            InvalidInputError: New password shorter than 6 or longer than 100
            UsernameTakenError: Username belongs to another user
            EmailTakenError: Email belongs to another user
        """
        user = self.get_current_user(user_id)

        if user["username"] != username and self.user_repo.exists_by_username(username):
            raise UsernameTakenError(username)
        if user["email"] != email and self.user_repo.exists_by_email(email):
            raise EmailTakenError(email)

        change_password = bool(password and password.strip())
        if change_password and not (
            MIN_PASSWORD_LENGTH <= len(password) <= MAX_UPDATED_PASSWORD_LENGTH
        ):
            raise InvalidInputError(
                f"Password must be between {MIN_PASSWORD_LENGTH} and "
                f"{MAX_UPDATED_PASSWORD_LENGTH} characters"
            )

        try:
            with self.db.atomic():
                self.user_repo.update_account(user_id, username, email)
                if change_password:
                    self.user_repo.update_password(user_id, password)
                if profile_picture is None:
                    self.user_repo.clear_profile_picture(user_id)
                elif not profile_picture.is_empty:
                    self.user_repo.set_profile_picture(
                        user_id,
                        profile_picture.data,
                        profile_picture.filename,
                        profile_picture.content_type,
                    )
        except sqlite3.IntegrityError as e:
            conflict = _conflict_from_integrity_error(e, username, email)
            if conflict is None:
                raise
            raise conflict from e

        if profile_picture is None:
            picture_change = "removed"
        elif profile_picture.is_empty:
            picture_change = "unchanged"
        else:
            picture_change = f"replaced ({profile_picture.size} bytes)"
        logger.info(
            "Updated profile of user %s: password %s, profile picture %s",
            user_id, "changed" if change_password else "unchanged", picture_change
        )
        return self.user_repo.get_by_id(user_id)

    def get_profile_picture(self, user_id: int) -> tuple[bytes, str, str | None]:
        """Get the profile picture bytes.

        Returns:
            Tuple of (data, content_type, filename)

        Raises:
            UserNotFoundError: User does not exist
            NotFoundError: User has no profile picture
        """
        user = self.get_current_user(user_id)
        data = user["profile_picture_data"]
        if not data:
            raise NotFoundError("No profile picture found")
        content_type = user["profile_picture_content_type"] or "application/octet-stream"
        return data, content_type, user["profile_picture_filename"]
