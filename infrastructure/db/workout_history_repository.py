"""
Supabase Workout History Repository Implementation.

Reads saved workout summaries for the personal-record calculator and the
join flow.
"""
from datetime import datetime
from typing import List, Optional
import logging

from pydantic import ValidationError
from supabase import AsyncClient

from domain.converters import db_row_to_workout_summary
from domain.models import WorkoutSummary

logger = logging.getLogger(__name__)


class SupabaseWorkoutHistoryRepository:
    """Supabase implementation of WorkoutHistoryRepository."""

    def __init__(self, client: AsyncClient, *, table: str = "workout_summaries"):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase async client instance (injected)
            table: Workout summaries table name
        """
        self._client = client
        self._table = table

    async def get_workout_history(
        self,
        user_id: str,
        *,
        before: Optional[datetime] = None,
        since: Optional[datetime] = None,
    ) -> List[WorkoutSummary]:
        """Get a user's workouts, oldest first, skipping malformed rows."""
        query = self._client.table(self._table).select("*").eq("user_id", user_id)
        if before is not None:
            query = query.lt("created_at", before.isoformat())
        if since is not None:
            query = query.gte("created_at", since.isoformat())
        response = await query.order("created_at").execute()

        workouts: List[WorkoutSummary] = []
        for row in response.data or []:
            try:
                workouts.append(db_row_to_workout_summary(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed workout summary %s: %s",
                    row.get("id"),
                    e.errors(include_url=False),
                )
        return workouts
