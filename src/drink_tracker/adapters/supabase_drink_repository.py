"""Supabase implementation for drink records."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from drink_tracker.adapters.supabase_query import execute, parse_timestamp
from drink_tracker.domain.drinks import Drink, DrinkFilters
from drink_tracker.domain.errors import DataAccessError, DrinkNotFoundError
from drink_tracker.services.drinks import DrinkRepository


@dataclass
class SupabaseDrinkRepository(DrinkRepository):
    """Supabase-backed repository for the drinks table."""

    client: Client

    def list_drinks(
        self, user_id: UUID, filters: DrinkFilters, limit: int, offset: int
    ) -> list[Drink]:
        """Return filtered drinks, newest first."""
        query = (
            self.client.table("drinks")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
        )
        if filters.search:
            query = query.ilike("name", f"%{filters.search}%")
        if filters.series:
            query = query.eq("series", filters.series)
        if filters.date_from:
            query = query.gte("created_at", filters.date_from.isoformat())
        if filters.date_to:
            query = query.lte("created_at", filters.date_to.isoformat())
        if limit > 0:
            query = query.limit(limit)
        if offset > 0:
            query = query.range(offset, offset + limit - 1)
        return [_parse_drink(row) for row in execute(query)]

    def list_all_drinks(self, user_id: UUID) -> list[Drink]:
        """Return every drink for a user."""
        query = (
            self.client.table("drinks")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
        )
        return [_parse_drink(row) for row in execute(query)]

    def get_drink(self, user_id: UUID, drink_id: UUID) -> Drink | None:
        """Return a drink by id, if present."""
        rows = execute(
            self.client.table("drinks")
            .select("*")
            .eq("id", str(drink_id))
            .eq("user_id", str(user_id))
            .limit(1)
        )
        if not rows:
            return None
        return _parse_drink(rows[0])

    def create_drink(self, user_id: UUID, payload: dict[str, object]) -> Drink:
        """Insert a drink and return it."""
        rows = execute(
            self.client.table("drinks").insert({**payload, "user_id": str(user_id)})
        )
        if not rows:
            raise DataAccessError("Failed to create drink")
        return _parse_drink(rows[0])

    def update_drink(
        self, user_id: UUID, drink_id: UUID, payload: dict[str, object]
    ) -> Drink:
        """Update a drink and return it."""
        rows = execute(
            self.client.table("drinks")
            .update(payload)
            .eq("id", str(drink_id))
            .eq("user_id", str(user_id))
        )
        if not rows:
            raise DrinkNotFoundError(f"Drink {drink_id} not found")
        return _parse_drink(rows[0])

    def delete_drink(self, user_id: UUID, drink_id: UUID) -> None:
        """Delete a drink."""
        execute(
            self.client.table("drinks")
            .delete()
            .eq("id", str(drink_id))
            .eq("user_id", str(user_id))
        )


def _parse_drink(row: dict[str, object]) -> Drink:
    """Parse a drinks row into a domain model."""
    created_at = parse_timestamp(row.get("created_at"))
    if created_at is None:
        raise DataAccessError(f"Drink {row.get('id')} has no created_at")
    notes = row.get("notes")
    return Drink(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        created_at=created_at,
        name=str(row.get("name", "")),
        series=str(row.get("series", "")),
        volume_ml=int(row.get("volume_ml", 0)),
        cost=float(row.get("cost", 0.0)),
        rating=int(row.get("rating", 0)),
        notes=str(notes) if notes is not None else None,
    )
