"""Services for the can library."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from drink_tracker.domain.drinks import Drink
from drink_tracker.domain.errors import AuthenticationError, DrinkTrackerError
from drink_tracker.domain.library import CanLibraryItem, CanType
from drink_tracker.services.drinks import DrinkRepository
from drink_tracker.services.images import CanImageService

_logger = logging.getLogger(__name__)


@dataclass
class LibraryService:
    """Application service building the can library."""

    drink_repository: DrinkRepository
    image_service: CanImageService

    def get_can_library(self, user_id: UUID | None) -> list[CanLibraryItem]:
        """Return one aggregate per distinct can, most purchased first."""
        if user_id is None:
            raise AuthenticationError
        drinks = self.drink_repository.list_all_drinks(user_id)
        if not drinks:
            return []

        try:
            images = self.image_service.load_image_map(user_id)
        except DrinkTrackerError:
            _logger.warning(
                "Image lookup failed, showing library without images",
                exc_info=True,
                extra={"user_id": str(user_id)},
            )
            images = {}
        return aggregate_library(drinks, images)

    def get_existing_can_types(self, user_id: UUID | None) -> list[CanType]:
        """Return distinct name and series pairs, sorted by name."""
        if user_id is None:
            raise AuthenticationError
        unique: dict[str, CanType] = {}
        for drink in self.drink_repository.list_all_drinks(user_id):
            unique[drink.can_key] = CanType(name=drink.name, series=drink.series)
        return sorted(unique.values(), key=lambda can: can.name.casefold())


def aggregate_library(
    drinks: Sequence[Drink], images: dict[str, str] | None = None
) -> list[CanLibraryItem]:
    """Group drinks by name and series into library items."""
    images = images or {}
    groups: dict[str, list[Drink]] = {}
    for drink in drinks:
        groups.setdefault(drink.can_key, []).append(drink)

    items = []
    for key, group in groups.items():
        first = group[0]
        count = len(group)
        purchased = [drink.created_at for drink in group]
        items.append(
            CanLibraryItem(
                id=key,
                name=first.name,
                series=first.series,
                volume_ml=first.volume_ml,
                count=count,
                total_spent=sum(drink.cost for drink in group),
                average_rating=sum(drink.rating for drink in group) / count,
                first_purchased=min(purchased),
                last_purchased=max(purchased),
                image_url=images.get(key),
            )
        )
    return sorted(items, key=lambda item: item.count, reverse=True)
