"""Tests for application services.

Tests the service layer business logic in isolation with mocked
repositories.
"""
import sqlite3
from unittest.mock import MagicMock, Mock

import pytest

from photoshelf.application.services import (
    AuthService,
    GalleryService,
    PhotoService,
    UploadedFile,
    UserService,
)
from photoshelf.exceptions import (
    DuplicateGalleryNameError,
    EmailTakenError,
    GalleryNotFoundError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    PhotoForbiddenError,
    PhotoNotFoundError,
    UsernameTakenError,
)
from photoshelf.infrastructure.repositories import GalleryFilter

JPEG = UploadedFile(data=b"\xff\xd8\xff" + b"0" * 100, filename="x.jpg", content_type="image/jpeg")


def _photo(photo_id: int, user_id: int = 1, gallery_id=None) -> dict:
    return {
        "id": photo_id,
        "title": f"Photo {photo_id}",
        "description": None,
        "original_filename": f"{photo_id}.jpg",
        "content_type": "image/jpeg",
        "size": 10,
        "user_id": user_id,
        "gallery_id": gallery_id,
    }


class TestAuthService:
    """Test AuthService credential checks."""

    @pytest.fixture
    def mock_user_repo(self):
        return Mock()

    @pytest.fixture
    def mock_token_provider(self):
        provider = Mock()
        provider.issue_token.return_value = "signed-token"
        return provider

    @pytest.fixture
    def auth_service(self, mock_user_repo, mock_token_provider):
        return AuthService(user_repository=mock_user_repo, token_provider=mock_token_provider)

    def test_authenticate_issues_token(self, auth_service, mock_user_repo, mock_token_provider):
        mock_user_repo.authenticate.return_value = {"id": 5, "username": "alice"}

        assert auth_service.authenticate("alice", "secret1") == "signed-token"
        mock_token_provider.issue_token.assert_called_once_with(5)

    def test_authenticate_wrong_password(self, auth_service, mock_user_repo, mock_token_provider):
        mock_user_repo.authenticate.return_value = None

        with pytest.raises(InvalidCredentialsError) as exc_info:
            auth_service.authenticate("alice", "wrong")

        assert exc_info.value.status_code == 401
        mock_token_provider.issue_token.assert_not_called()


class TestUserService:
    """Test UserService registration and profile rules."""

    @pytest.fixture
    def mock_user_repo(self):
        repo = Mock()
        repo.exists_by_username.return_value = False
        repo.exists_by_email.return_value = False
        return repo

    @pytest.fixture
    def user_service(self, mock_user_repo):
        return UserService(user_repository=mock_user_repo, db=MagicMock())

    @pytest.fixture
    def alice(self):
        return {
            "id": 1, "username": "alice", "email": "alice@example.com",
            "profile_picture_data": None,
            "profile_picture_filename": None,
            "profile_picture_content_type": None,
        }

    def test_register_username_taken(self, user_service, mock_user_repo):
        mock_user_repo.exists_by_username.return_value = True

        with pytest.raises(UsernameTakenError):
            user_service.register("alice", "alice@example.com", "secret1")
        mock_user_repo.create.assert_not_called()

    def test_register_email_taken(self, user_service, mock_user_repo):
        mock_user_repo.exists_by_email.return_value = True

        with pytest.raises(EmailTakenError):
            user_service.register("alice", "alice@example.com", "secret1")

    def test_register_race_maps_integrity_error(self, user_service, mock_user_repo):
        mock_user_repo.create.side_effect = sqlite3.IntegrityError(
            "UNIQUE constraint failed: users.email"
        )

        with pytest.raises(EmailTakenError):
            user_service.register("alice", "alice@example.com", "secret1")

    def test_update_profile_keeps_own_username(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice
        mock_user_repo.exists_by_username.return_value = True
        mock_user_repo.exists_by_email.return_value = True

        user_service.update_profile(1, "alice", "alice@example.com", profile_picture=UploadedFile(b""))

        mock_user_repo.update_account.assert_called_once_with(1, "alice", "alice@example.com")
        mock_user_repo.update_password.assert_not_called()
        mock_user_repo.clear_profile_picture.assert_not_called()
        mock_user_repo.set_profile_picture.assert_not_called()

    def test_update_profile_username_of_other_user(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice
        mock_user_repo.exists_by_username.return_value = True

        with pytest.raises(UsernameTakenError):
            user_service.update_profile(1, "bob", "alice@example.com")
        mock_user_repo.update_account.assert_not_called()

    def test_update_profile_blank_password_not_changed(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice

        user_service.update_profile(1, "alice", "alice@example.com", password="   ")

        mock_user_repo.update_password.assert_not_called()

    def test_update_profile_short_password(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice

        with pytest.raises(InvalidInputError):
            user_service.update_profile(1, "alice", "alice@example.com", password="abc")

    def test_update_profile_none_picture_clears(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice

        user_service.update_profile(1, "alice", "alice@example.com", profile_picture=None)

        mock_user_repo.clear_profile_picture.assert_called_once_with(1)

    def test_update_profile_new_picture(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice

        user_service.update_profile(1, "alice", "alice@example.com", profile_picture=JPEG)

        mock_user_repo.set_profile_picture.assert_called_once_with(
            1, JPEG.data, "x.jpg", "image/jpeg"
        )

    def test_profile_picture_missing(self, user_service, mock_user_repo, alice):
        mock_user_repo.get_by_id.return_value = alice

        with pytest.raises(NotFoundError):
            user_service.get_profile_picture(1)


class TestPhotoService:
    """Test PhotoService validation and ownership rules."""

    @pytest.fixture
    def mock_photo_repo(self):
        return Mock()

    @pytest.fixture
    def mock_gallery_repo(self):
        return Mock()

    @pytest.fixture
    def photo_service(self, mock_photo_repo, mock_gallery_repo):
        return PhotoService(
            photo_repository=mock_photo_repo,
            gallery_repository=mock_gallery_repo,
            db=MagicMock()
        )

    def test_create_rejects_non_image(self, photo_service, mock_photo_repo):
        text = UploadedFile(data=b"hello", filename="notes.txt", content_type="text/plain")

        with pytest.raises(InvalidInputError):
            photo_service.create_photo(1, "Notes", None, text)
        mock_photo_repo.create.assert_not_called()

    def test_create_rejects_missing_content_type(self, photo_service, mock_photo_repo):
        with pytest.raises(InvalidInputError):
            photo_service.create_photo(1, "X", None, UploadedFile(data=b"abc", filename="x"))

    def test_create_rejects_oversized_file(self, photo_service, mock_photo_repo):
        big = UploadedFile(data=b"0" * (8 * 1024 * 1024 + 1), filename="big.jpg", content_type="image/jpeg")

        with pytest.raises(InvalidInputError):
            photo_service.create_photo(1, "Big", None, big)
        mock_photo_repo.create.assert_not_called()

    def test_create_accepts_exact_limit(self, photo_service, mock_photo_repo):
        exact = UploadedFile(data=b"0" * (8 * 1024 * 1024), filename="ok.jpg", content_type="image/jpeg")
        mock_photo_repo.create.return_value = 1

        photo_service.create_photo(1, "Ok", None, exact)

        mock_photo_repo.create.assert_called_once()

    def test_create_into_foreign_gallery(self, photo_service, mock_photo_repo, mock_gallery_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = None

        with pytest.raises(GalleryNotFoundError):
            photo_service.create_photo(1, "X", None, JPEG, gallery_id=99)
        mock_photo_repo.create.assert_not_called()

    def test_create_rejects_blank_title(self, photo_service, mock_photo_repo):
        with pytest.raises(InvalidInputError):
            photo_service.create_photo(1, "   ", None, JPEG)
        mock_photo_repo.create.assert_not_called()

    def test_create_strips_title(self, photo_service, mock_photo_repo):
        mock_photo_repo.create.return_value = 1

        photo_service.create_photo(1, "  Sunset ", None, JPEG)

        assert mock_photo_repo.create.call_args.kwargs["title"] == "Sunset"

    def test_bulk_titles_fall_back_to_filename(self, photo_service, mock_photo_repo):
        files = [
            UploadedFile(b"1", "x.jpg", "image/jpeg"),
            UploadedFile(b"2", "y.png", "image/png"),
            UploadedFile(b"3", "z.gif", "image/gif"),
        ]
        mock_photo_repo.create.side_effect = [1, 2, 3]
        mock_photo_repo.get_summaries_by_ids.return_value = {i: _photo(i) for i in (1, 2, 3)}

        result = photo_service.bulk_create_photos(1, files, titles=["A", "", None])

        titles = [c.kwargs["title"] for c in mock_photo_repo.create.call_args_list]
        assert titles == ["A", "y", "z"]
        assert [p["id"] for p in result] == [1, 2, 3]

    def test_bulk_title_is_stripped(self, photo_service, mock_photo_repo):
        mock_photo_repo.create.return_value = 1
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1)}

        photo_service.bulk_create_photos(1, [JPEG], titles=["  Beach  "], descriptions=["sand"])

        kwargs = mock_photo_repo.create.call_args.kwargs
        assert kwargs["title"] == "Beach"
        assert kwargs["description"] == "sand"

    def test_bulk_empty_list(self, photo_service):
        with pytest.raises(InvalidInputError):
            photo_service.bulk_create_photos(1, [])

    def test_bulk_bad_file_stores_nothing(self, photo_service, mock_photo_repo):
        bad = UploadedFile(b"text", "readme.txt", "text/plain")

        with pytest.raises(InvalidInputError):
            photo_service.bulk_create_photos(1, [JPEG, bad])
        mock_photo_repo.create.assert_not_called()

    def test_get_missing_photo(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summary.return_value = None

        with pytest.raises(PhotoNotFoundError):
            photo_service.get_photo(5, user_id=1)

    def test_get_foreign_photo(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summary.return_value = _photo(5, user_id=2)

        with pytest.raises(PhotoForbiddenError) as exc_info:
            photo_service.get_photo(5, user_id=1)
        assert exc_info.value.status_code == 403

    def test_update_with_empty_file_keeps_bytes(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summary.return_value = _photo(5)

        photo_service.update_photo(5, 1, "New", None, file=UploadedFile(b"", "", "image/jpeg"))

        mock_photo_repo.update_details.assert_called_once_with(5, "New", None)
        mock_photo_repo.replace_file.assert_not_called()
        mock_photo_repo.move_to_gallery.assert_not_called()

    def test_update_rejects_blank_title(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summary.return_value = _photo(5)

        with pytest.raises(InvalidInputError):
            photo_service.update_photo(5, 1, " ", None)
        mock_photo_repo.update_details.assert_not_called()

    def test_bulk_delete_checks_all_first(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1), 2: _photo(2, user_id=9)}

        with pytest.raises(PhotoForbiddenError):
            photo_service.bulk_delete_photos([1, 2], user_id=1)
        mock_photo_repo.delete_many.assert_not_called()

    def test_bulk_delete_missing_id(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1)}

        with pytest.raises(PhotoNotFoundError):
            photo_service.bulk_delete_photos([1, 3], user_id=1)
        mock_photo_repo.delete_many.assert_not_called()

    def test_download_without_bytes(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_by_id.return_value = {**_photo(5), "data": b""}

        with pytest.raises(NotFoundError):
            photo_service.download(5, user_id=1)

    def test_download_fallbacks(self, photo_service, mock_photo_repo):
        mock_photo_repo.get_by_id.return_value = {
            **_photo(5), "data": b"abc", "original_filename": None, "content_type": None
        }

        assert photo_service.download(5, user_id=1) == (b"abc", "application/octet-stream", "photo-5")

    def test_list_passes_filter(self, photo_service, mock_photo_repo):
        photo_service.list_photos(1, GalleryFilter.unorganized(), 0, 10)

        mock_photo_repo.list_by_user.assert_called_once_with(1, GalleryFilter.unorganized(), 0, 10)


class TestGalleryService:
    """Test GalleryService business logic."""

    @pytest.fixture
    def mock_gallery_repo(self):
        repo = Mock()
        repo.exists_by_name_and_user.return_value = False
        return repo

    @pytest.fixture
    def mock_photo_repo(self):
        return Mock()

    @pytest.fixture
    def gallery_service(self, mock_gallery_repo, mock_photo_repo):
        return GalleryService(
            gallery_repository=mock_gallery_repo,
            photo_repository=mock_photo_repo,
            db=MagicMock()
        )

    def test_create_duplicate_name(self, gallery_service, mock_gallery_repo):
        mock_gallery_repo.exists_by_name_and_user.return_value = True

        with pytest.raises(DuplicateGalleryNameError) as exc_info:
            gallery_service.create_gallery("Trips", None, user_id=1)
        assert exc_info.value.status_code == 400
        mock_gallery_repo.create.assert_not_called()

    def test_create_integrity_error_is_conflict(self, gallery_service, mock_gallery_repo):
        mock_gallery_repo.create.side_effect = sqlite3.IntegrityError("UNIQUE constraint failed")

        with pytest.raises(DuplicateGalleryNameError):
            gallery_service.create_gallery("Trips", None, user_id=1)

    def test_update_same_name_allowed(self, gallery_service, mock_gallery_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = {"id": 3, "name": "Trips", "user_id": 1}
        mock_gallery_repo.exists_by_name_and_user.return_value = True

        gallery_service.update_gallery(3, 1, "Trips", "new description")

        mock_gallery_repo.update.assert_called_once_with(3, "Trips", "new description")

    def test_update_to_existing_name(self, gallery_service, mock_gallery_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = {"id": 3, "name": "Trips", "user_id": 1}
        mock_gallery_repo.exists_by_name_and_user.return_value = True

        with pytest.raises(DuplicateGalleryNameError):
            gallery_service.update_gallery(3, 1, "Family", None)
        mock_gallery_repo.update.assert_not_called()

    def test_foreign_gallery_is_not_found(self, gallery_service, mock_gallery_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = None

        with pytest.raises(GalleryNotFoundError) as exc_info:
            gallery_service.get_gallery(3, user_id=2)
        assert exc_info.value.status_code == 404

    def test_delete_keeps_photos(self, gallery_service, mock_gallery_repo, mock_photo_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = {"id": 3, "name": "Trips", "user_id": 1}
        mock_photo_repo.detach_from_gallery.return_value = 2

        gallery_service.delete_gallery(3, 1, delete_photos=False)

        mock_photo_repo.detach_from_gallery.assert_called_once_with(3)
        mock_photo_repo.delete_by_gallery.assert_not_called()
        mock_gallery_repo.delete.assert_called_once_with(3)

    def test_delete_with_photos(self, gallery_service, mock_gallery_repo, mock_photo_repo):
        mock_gallery_repo.get_by_id_and_user.return_value = {"id": 3, "name": "Trips", "user_id": 1}
        mock_photo_repo.delete_by_gallery.return_value = 2

        gallery_service.delete_gallery(3, 1, delete_photos=True)

        mock_photo_repo.delete_by_gallery.assert_called_once_with(3)
        mock_photo_repo.detach_from_gallery.assert_not_called()

    def test_move_empty_list(self, gallery_service):
        with pytest.raises(InvalidInputError):
            gallery_service.move_photos([], 3, user_id=1)

    def test_move_foreign_photo(self, gallery_service, mock_photo_repo):
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1), 2: _photo(2, user_id=2)}

        with pytest.raises(PhotoForbiddenError):
            gallery_service.move_photos([1, 2], None, user_id=1)
        mock_photo_repo.move_to_gallery.assert_not_called()

    def test_move_to_foreign_gallery(self, gallery_service, mock_gallery_repo, mock_photo_repo):
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1)}
        mock_gallery_repo.get_by_id_and_user.return_value = None

        with pytest.raises(GalleryNotFoundError):
            gallery_service.move_photos([1], 8, user_id=1)
        mock_photo_repo.move_to_gallery.assert_not_called()

    def test_move_to_unorganized(self, gallery_service, mock_photo_repo):
        mock_photo_repo.get_summaries_by_ids.return_value = {1: _photo(1, gallery_id=3)}
        mock_photo_repo.move_to_gallery.return_value = 1

        assert gallery_service.move_photos([1], None, user_id=1) == 1
        mock_photo_repo.move_to_gallery.assert_called_once_with([1], None)
