"""Domain models for the can library and can images."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class CanImage:
    """Stored image association for a can."""

    id: UUID
    user_id: UUID
    can_name: str
    series: str
    image_url: str
    created_at: datetime | None


@dataclass(frozen=True)
class CanLibraryItem:
    """Aggregate of every purchase of one can."""

    id: str
    name: str
    series: str
    volume_ml: int
    count: int
    total_spent: float
    average_rating: float
    first_purchased: datetime
    last_purchased: datetime
    image_url: str | None = None


@dataclass(frozen=True)
class CanType:
    """Distinct name and series pair seen in a user's drinks."""

    name: str
    series: str


@dataclass(frozen=True)
class ImageFile:
    """Uploaded image contents."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        """Return the file extension without the dot."""
        return self.filename.rsplit(".", 1)[-1]
