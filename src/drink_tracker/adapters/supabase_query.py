"""Helpers shared by the Supabase repositories."""

from datetime import UTC, datetime
from typing import Any

import httpx
from supabase import PostgrestAPIError

from drink_tracker.domain.errors import DataAccessError


def execute(query: Any) -> list[dict[str, Any]]:
    """Run a query builder and return its rows, wrapping API errors."""
    try:
        response = query.execute()
    except PostgrestAPIError as exc:
        raise DataAccessError(exc.message or str(exc)) from exc
    except httpx.HTTPError as exc:
        raise DataAccessError(str(exc)) from exc
    return response.data or []


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO 8601 column value into an aware datetime."""
    if not isinstance(raw, str) or not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
