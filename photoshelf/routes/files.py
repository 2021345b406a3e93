"""Helpers for multipart uploads and binary responses."""
from urllib.parse import quote

from fastapi import Response, UploadFile

from ..application.services import UploadedFile


async def read_upload(upload: UploadFile) -> UploadedFile:
    """Read an UploadFile into memory."""
    data = await upload.read()
    return UploadedFile(data=data, filename=upload.filename, content_type=upload.content_type)


def binary_response(data: bytes, content_type: str, filename: str | None, disposition: str) -> Response:
    """Build a response carrying raw bytes with a Content-Disposition header."""
    headers = {}
    if filename:
        headers["Content-Disposition"] = f"{disposition}; filename*=UTF-8''{quote(filename)}"
    return Response(content=data, media_type=content_type, headers=headers)
