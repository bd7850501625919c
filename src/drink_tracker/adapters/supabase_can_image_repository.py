"""Supabase implementation for can image metadata."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from drink_tracker.adapters.supabase_query import execute, parse_timestamp
from drink_tracker.domain.errors import DataAccessError
from drink_tracker.domain.library import CanImage
from drink_tracker.services.images import CanImageRepository


@dataclass
class SupabaseCanImageRepository(CanImageRepository):
    """Supabase-backed repository for the can_images table."""

    client: Client

    def list_images(self, user_id: UUID) -> list[CanImage]:
        """Return every image row for a user."""
        rows = execute(
            self.client.table("can_images").select("*").eq("user_id", str(user_id))
        )
        return [_parse_image(row) for row in rows]

    def upsert_image(
        self, user_id: UUID, can_name: str, series: str, image_url: str
    ) -> CanImage:
        """Create or replace the image row keyed by can and user."""
        rows = execute(
            self.client.table("can_images").upsert(
                {
                    "can_name": can_name,
                    "series": series,
                    "image_url": image_url,
                    "user_id": str(user_id),
                },
                on_conflict="can_name,series,user_id",
            )
        )
        if not rows:
            raise DataAccessError("Failed to save can image")
        return _parse_image(rows[0])

    def delete_image(self, user_id: UUID, can_name: str, series: str) -> None:
        """Delete the image row for a can."""
        execute(
            self.client.table("can_images")
            .delete()
            .eq("can_name", can_name)
            .eq("series", series)
            .eq("user_id", str(user_id))
        )


def _parse_image(row: dict[str, object]) -> CanImage:
    return CanImage(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        can_name=str(row.get("can_name", "")),
        series=str(row.get("series", "")),
        image_url=str(row.get("image_url", "")),
        created_at=parse_timestamp(row.get("created_at")),
    )
