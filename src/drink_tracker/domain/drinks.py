"""Domain models for logged drinks."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

DRINK_SERIES = ("Normal", "Ultra", "Juice", "Reserve", "Special")


@dataclass(frozen=True)
class Drink:
    """A single logged drink purchase."""

    id: UUID
    user_id: UUID
    created_at: datetime
    name: str
    series: str
    volume_ml: int
    cost: float
    rating: int
    notes: str | None = None

    @property
    def can_key(self) -> str:
        """Return the name/series grouping key."""
        return can_key(self.name, self.series)


@dataclass(frozen=True)
class DrinkFilters:
    """Optional filters for drink listings."""

    search: str | None = None
    series: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


@dataclass(frozen=True)
class DrinkStats:
    """Summary numbers over a set of drinks."""

    total_spent: float
    total_drinks: int
    average_rating: float


def can_key(name: str, series: str) -> str:
    """Build the key shared by the library, image rows and local cache."""
    return f"{name}_{series}"
