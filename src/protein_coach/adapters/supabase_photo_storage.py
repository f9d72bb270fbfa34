"""Supabase Storage adapter for meal photos."""

from dataclasses import dataclass

from storage3.exceptions import StorageApiError
from supabase import Client

from protein_coach.errors import StorageError
from protein_coach.services.photos import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Supabase implementation for the meal photo bucket."""

    client: Client
    bucket: str = "meal_photos"

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """Create a signed URL for a photo path."""
        try:
            response = self.client.storage.from_(self.bucket).create_signed_url(
                path, expires_in
            )
        except StorageApiError as exc:
            raise StorageError(f"createSignedUrl failed: {exc}") from exc
        signed_url = None
        if isinstance(response, dict):
            signed_url = response.get("signedURL") or response.get("signedUrl")
        if not signed_url:
            raise StorageError("createSignedUrl failed: no signedUrl")
        return str(signed_url)

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Upload photo bytes without overwriting an existing object."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path,
                content,
                {"content-type": content_type, "upsert": "false"},
            )
        except StorageApiError as exc:
            raise StorageError(f"upload failed: {exc}") from exc
