"""
Trophy Repository Interface (Port).

Trophies are append-only: the engine writes each one exactly once and never
updates or deletes it.
"""
from typing import List, Protocol

from domain.models import Trophy


class TrophyRepository(Protocol):
    """Abstract interface for trophy persistence."""

    async def award_trophy(self, trophy: Trophy) -> None:
        """Persist a trophy record."""
        ...

    async def has_challenge_trophy(self, user_id: str, challenge_id: str) -> bool:
        """Check whether the user already holds a trophy from this challenge."""
        ...

    async def get_trophies(self, user_id: str) -> List[Trophy]:
        """Get a user's trophies, newest first."""
        ...
