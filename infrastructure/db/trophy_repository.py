"""
Supabase Trophy Repository Implementation.

Trophies are insert-only.
"""
from typing import List
import logging

from pydantic import ValidationError
from supabase import AsyncClient

from domain.converters import db_row_to_trophy, trophy_to_db_row
from domain.models import Trophy

logger = logging.getLogger(__name__)


class SupabaseTrophyRepository:
    """Supabase implementation of TrophyRepository."""

    def __init__(self, client: AsyncClient, *, table: str = "trophies"):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase async client instance (injected)
            table: Trophies table name
        """
        self._client = client
        self._table = table

    async def award_trophy(self, trophy: Trophy) -> None:
        """Insert a trophy record."""
        await self._client.table(self._table).insert(trophy_to_db_row(trophy)).execute()

    async def has_challenge_trophy(self, user_id: str, challenge_id: str) -> bool:
        """Check whether the user already holds a trophy from this challenge."""
        response = await (
            self._client.table(self._table)
            .select("id")
            .eq("user_id", user_id)
            .eq("challenge_id", challenge_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    async def get_trophies(self, user_id: str) -> List[Trophy]:
        """Get a user's trophies, newest first."""
        response = await (
            self._client.table(self._table)
            .select("*")
            .eq("user_id", user_id)
            .order("date_earned", desc=True)
            .execute()
        )
        trophies: List[Trophy] = []
        for row in response.data or []:
            try:
                trophies.append(db_row_to_trophy(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed trophy {row.get('id')}: {e}")
        return trophies
