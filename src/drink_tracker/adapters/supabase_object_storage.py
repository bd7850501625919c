"""Supabase storage bucket for can images."""

from dataclasses import dataclass

import httpx
from supabase import Client, StorageException

from drink_tracker.domain.errors import DataAccessError
from drink_tracker.services.images import ObjectStorage


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Uploads images to a Supabase storage bucket."""

    client: Client
    bucket: str = "can_images"

    def upload(self, path: str, content: bytes, content_type: str | None) -> None:
        """Upload bytes to the bucket."""
        file_options = {"content-type": content_type} if content_type else None
        try:
            self.client.storage.from_(self.bucket).upload(
                path, content, file_options=file_options
            )
        except (StorageException, httpx.HTTPError) as exc:
            raise DataAccessError(str(exc)) from exc

    def get_public_url(self, path: str) -> str:
        """Return the public URL for an uploaded object."""
        try:
            return self.client.storage.from_(self.bucket).get_public_url(path)
        except (StorageException, httpx.HTTPError) as exc:
            raise DataAccessError(str(exc)) from exc
