"""Drink logging service and summary statistics."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from drink_tracker.domain.drinks import Drink, DrinkFilters, DrinkStats
from drink_tracker.domain.errors import AuthenticationError, DrinkNotFoundError


class DrinkRepository(Protocol):
    """Persistence interface for drink records."""

    def list_drinks(
        self, user_id: UUID, filters: DrinkFilters, limit: int, offset: int
    ) -> list[Drink]:
        """Return filtered drinks, newest first."""

    def list_all_drinks(self, user_id: UUID) -> list[Drink]:
        """Return every drink for a user."""

    def get_drink(self, user_id: UUID, drink_id: UUID) -> Drink | None:
        """Return a drink by id, if present."""

    def create_drink(self, user_id: UUID, payload: dict[str, object]) -> Drink:
        """Create a drink and return it."""

    def update_drink(
        self, user_id: UUID, drink_id: UUID, payload: dict[str, object]
    ) -> Drink:
        """Update a drink and return it."""

    def delete_drink(self, user_id: UUID, drink_id: UUID) -> None:
        """Delete a drink."""


@dataclass
class DrinkService:
    """Application service for drink records."""

    repository: DrinkRepository

    def list_drinks(
        self,
        user_id: UUID,
        filters: DrinkFilters | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Drink]:
        """Return a page of drinks matching the filters."""
        return self.repository.list_drinks(
            user_id, filters or DrinkFilters(), limit, offset
        )

    def list_all_drinks(self, user_id: UUID) -> list[Drink]:
        """Return every drink for a user."""
        return self.repository.list_all_drinks(user_id)

    def get_drink(self, user_id: UUID, drink_id: UUID) -> Drink:
        """Return a drink or raise when it is missing."""
        drink = self.repository.get_drink(user_id, drink_id)
        if drink is None:
            raise DrinkNotFoundError(f"Drink {drink_id} not found")
        return drink

    def create_drink(
        self, user_id: UUID | None, payload: dict[str, object]
    ) -> Drink:
        """Create a drink owned by the given user."""
        if user_id is None:
            raise AuthenticationError("User must be authenticated to create drinks")
        return self.repository.create_drink(user_id, payload)

    def update_drink(
        self, user_id: UUID, drink_id: UUID, payload: dict[str, object]
    ) -> Drink:
        """Apply a partial update to a drink."""
        return self.repository.update_drink(user_id, drink_id, payload)

    def delete_drink(self, user_id: UUID, drink_id: UUID) -> None:
        """Delete a drink."""
        self.repository.delete_drink(user_id, drink_id)

    def get_recent_drinks(self, user_id: UUID, limit: int = 5) -> list[Drink]:
        """Return the most recent drinks."""
        return self.repository.list_drinks(user_id, DrinkFilters(), limit, 0)

    def get_stats(self, user_id: UUID) -> DrinkStats:
        """Return totals over every drink the user has logged."""
        return compute_stats(self.repository.list_all_drinks(user_id))


def compute_stats(drinks: Sequence[Drink]) -> DrinkStats:
    """Sum cost, count drinks and average the rating."""
    total_drinks = len(drinks)
    if total_drinks == 0:
        return DrinkStats(total_spent=0, total_drinks=0, average_rating=0)
    total_spent = sum(drink.cost for drink in drinks)
    average_rating = sum(drink.rating for drink in drinks) / total_drinks
    return DrinkStats(
        total_spent=total_spent,
        total_drinks=total_drinks,
        average_rating=average_rating,
    )
