"""Uploaded file payloads passed from routes into services."""
from dataclasses import dataclass

from ... import config
from ...exceptions import InvalidInputError


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded file already read into memory.

    Routes build these from ``UploadFile`` so services stay independent
    of the web framework.
    """

    data: bytes
    filename: str | None = None
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data


def validate_image(file: UploadedFile) -> None:
    """Reject oversized files and non-image content types.

    Raises:
        InvalidInputError: If the file exceeds MAX_PHOTO_SIZE or is not an image
    """
    if file.size > config.MAX_PHOTO_SIZE:
        raise InvalidInputError(
            f"File size exceeds maximum limit of {config.MAX_PHOTO_SIZE // (1024 * 1024)}MB",
            details={"filename": file.filename, "size": file.size},
        )
    if not file.content_type or not file.content_type.startswith(config.IMAGE_CONTENT_TYPE_PREFIX):
        raise InvalidInputError(
            "Only image files are allowed",
            details={"filename": file.filename, "content_type": file.content_type},
        )


def title_from_filename(filename: str | None) -> str:
    """Derive a photo title from its filename.

    The last extension is dropped; a name whose only dot is the leading
    one is kept whole.

    Examples:
        >>> title_from_filename("holiday.beach.jpg")
        'holiday.beach'
        >>> title_from_filename(".hidden")
        '.hidden'
        >>> title_from_filename(None)
        'Untitled'
    """
    if not filename:
        return "Untitled"
    dot = filename.rfind(".")
    if dot > 0:
        return filename[:dot]
    return filename
