"""Shared execution of Supabase queries."""

from typing import Any

import httpx
from postgrest import APIError

from diet_coach.domain.errors import TransportError


def execute(query: Any, action: str) -> Any:
    """Run a query builder, raising ``TransportError`` when the database fails."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        raise TransportError(f"Supabase {action} failed: {exc}") from exc


def first_row(response: Any, action: str) -> dict[str, Any]:
    """Return the first row written by an insert."""
    if not response.data:
        raise TransportError(f"Supabase {action} returned no rows")
    return response.data[0]
