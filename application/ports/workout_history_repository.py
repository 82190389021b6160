"""
Workout History Repository Interface (Port).

Read-only access to a user's saved workout summaries. Used by the
personal-record calculator and by the join flow to seed initial progress.
"""
from datetime import datetime
from typing import List, Optional, Protocol

from domain.models import WorkoutSummary


class WorkoutHistoryRepository(Protocol):
    """Abstract interface for reading past workouts."""

    async def get_workout_history(
        self,
        user_id: str,
        *,
        before: Optional[datetime] = None,
        since: Optional[datetime] = None,
    ) -> List[WorkoutSummary]:
        """
        Get a user's workouts, oldest first.

        Args:
            user_id: Owning user
            before: Only workouts created strictly before this time
            since: Only workouts created at or after this time

        Returns:
            List of WorkoutSummary models (malformed records skipped)
        """
        ...
