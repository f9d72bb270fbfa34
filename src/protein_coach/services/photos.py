"""Meal photo storage."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from protein_coach.errors import BadRequest

_logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"
DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_MAX_PHOTO_BYTES = 10 * 1024 * 1024


class PhotoStorage(Protocol):
    """Interface for the private meal photo bucket."""

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """Return a time-limited URL for a stored photo."""

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Store a new photo at ``path`` without overwriting."""


@dataclass
class PhotoUploadService:
    """Service that stores meal photos under a per-session prefix."""

    storage: PhotoStorage
    max_bytes: int = DEFAULT_MAX_PHOTO_BYTES

    def upload(
        self,
        session_id: str | None,
        filename: str | None,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """Upload a photo and return its path inside the bucket."""
        cleaned_session = (session_id or "").strip()
        if not cleaned_session:
            raise BadRequest("Missing session_id")
        if not content:
            raise BadRequest("No file provided")
        if len(content) > self.max_bytes:
            raise BadRequest(f"Photo exceeds {self.max_bytes} bytes")

        path = build_photo_path(cleaned_session, filename)
        self.storage.upload(path, content, content_type or DEFAULT_CONTENT_TYPE)
        _logger.info("Photo uploaded: path=%s bytes=%s", path, len(content))
        return path


def build_photo_path(session_id: str, filename: str | None) -> str:
    """Return ``{session_id}/{uuid}.{ext}`` for a new upload."""
    return f"{session_id}/{uuid4()}.{_extension(filename)}"


def _extension(filename: str | None) -> str:
    name = (filename or "").strip()
    if "." not in name:
        return DEFAULT_EXTENSION
    ext = name.rsplit(".", 1)[1].lower()
    return ext or DEFAULT_EXTENSION
