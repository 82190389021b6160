"""
Challenge Repository Interface (Port).

This module defines the abstract interface for challenge persistence.
Used by the ChallengeProgressService and the challenge use cases.

Every mutation goes through a transactional read-modify-write: the adapter
reads the current document inside its transaction boundary, hands it to a
callback, and commits the callback's result. Callers never overwrite a
challenge blindly.
"""
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Protocol

from domain.models import Challenge

# Receives the in-transaction snapshot, returns the document to commit.
ChallengeMutation = Callable[[Challenge], Awaitable[Challenge]]

# Receives the in-transaction snapshot, returns the user's new progress value.
ProgressUpdate = Callable[[Challenge], float]


class ChallengeRepository(Protocol):
    """
    Abstract interface for challenge data access.

    Implementations must guarantee that `update_challenge` and
    `update_challenge_progress` are atomic with respect to concurrent writers
    of the same challenge.
    """

    async def get_active_challenges(
        self,
        user_id: str,
        *,
        now: datetime,
    ) -> List[Challenge]:
        """
        Get challenges the user participates in that have not ended.

        Args:
            user_id: Participant ID
            now: Reference time; challenges with end_date <= now are excluded

        Returns:
            List of Challenge models (malformed records skipped)
        """
        ...

    async def get_available_challenges(
        self,
        *,
        now: datetime,
    ) -> List[Challenge]:
        """
        Get every challenge that has not ended, regardless of membership.

        Individual records that fail to decode are logged and skipped.
        """
        ...

    async def get_challenge(self, challenge_id: str) -> Optional[Challenge]:
        """
        Get a single challenge.

        Returns:
            Challenge or None if it does not exist
        """
        ...

    async def create_challenge(self, challenge: Challenge) -> Challenge:
        """Persist a new challenge and return it as stored."""
        ...

    async def update_challenge(
        self,
        challenge_id: str,
        mutate: ChallengeMutation,
    ) -> Challenge:
        """
        Transactionally read, mutate and write a challenge.

        `mutate` may run more than once if the adapter retries a conflicting
        transaction, so it must not have side effects beyond reads.

        Args:
            challenge_id: Challenge to update
            mutate: Async callback producing the document to commit

        Returns:
            The committed challenge

        Raises:
            ChallengeNotFoundError: If the challenge does not exist
        """
        ...

    async def update_challenge_progress(
        self,
        challenge_id: str,
        user_id: str,
        progress: ProgressUpdate,
    ) -> Challenge:
        """
        Transactionally set one participant's progress entry.

        `progress` computes the new value from the in-transaction snapshot, so
        concurrent contributions to the same challenge are never lost.

        Args:
            challenge_id: Challenge to update
            user_id: Participant whose entry is written
            progress: Callback returning the new per-user value

        Returns:
            The committed challenge

        Raises:
            ChallengeNotFoundError: If the challenge does not exist
        """
        ...
