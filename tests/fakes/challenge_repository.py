"""
Fake Challenge Repository for Testing.

In-memory implementation of ChallengeRepository. Challenges are stored as
database rows and decoded on every read, so malformed documents can be seeded
the same way they occur in production.

Transactions are serialized per challenge with an asyncio.Lock and yield to
the event loop between the read and the write, so concurrent callers really
interleave around the critical section.
"""
import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from application.exceptions import ChallengeNotFoundError
from application.ports import ChallengeMutation, ProgressUpdate
from domain.converters import challenge_to_db_row, db_row_to_challenge
from domain.models import Challenge


class FakeChallengeRepository:
    """
    In-memory fake implementation of ChallengeRepository.

    Supports:
    - seed() / seed_rows() for well-formed and malformed documents
    - fail_updates_for() to inject a failure into one challenge's writes
    - commit_count / version_of() to inspect what was written
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._rows: Dict[str, Dict[str, Any]] = {}
        self._versions: Dict[str, int] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._failures: Dict[str, Exception] = {}
        self.commit_count = 0

    def reset(self) -> None:
        """Clear all stored data."""
        self._rows.clear()
        self._versions.clear()
        self._locks.clear()
        self._failures.clear()
        self.commit_count = 0

    def seed(self, challenges: List[Challenge]) -> None:
        """Seed the repository with challenges."""
        for challenge in challenges:
            self._store(challenge_to_db_row(challenge))

    def seed_rows(self, rows: List[Dict[str, Any]]) -> None:
        """Seed raw rows, including ones that fail to decode."""
        for row in rows:
            self._store(dict(row))

    def fail_updates_for(self, challenge_id: str, error: Exception) -> None:
        """Make every transaction on `challenge_id` raise `error`."""
        self._failures[challenge_id] = error

    def version_of(self, challenge_id: str) -> int:
        return self._versions.get(challenge_id, 0)

    def _store(self, row: Dict[str, Any]) -> None:
        self._rows[row["id"]] = row
        self._versions.setdefault(row["id"], 0)

    def _decoded(self) -> List[Challenge]:
        challenges = []
        for row in self._rows.values():
            try:
                challenges.append(db_row_to_challenge(row))
            except ValidationError:
                continue
        return challenges

    # =========================================================================
    # ChallengeRepository protocol
    # =========================================================================

    async def get_active_challenges(
        self,
        user_id: str,
        *,
        now: datetime,
    ) -> List[Challenge]:
        return [
            c for c in self._decoded()
            if c.is_participant(user_id) and c.end_date > now
        ]

    async def get_available_challenges(self, *, now: datetime) -> List[Challenge]:
        return sorted(
            (c for c in self._decoded() if c.end_date > now),
            key=lambda c: c.end_date,
        )

    async def get_challenge(self, challenge_id: str) -> Optional[Challenge]:
        row = self._rows.get(challenge_id)
        if row is None:
            return None
        try:
            return db_row_to_challenge(row)
        except ValidationError:
            return None

    async def create_challenge(self, challenge: Challenge) -> Challenge:
        self._store(challenge_to_db_row(challenge))
        return challenge

    async def update_challenge(
        self,
        challenge_id: str,
        mutate: ChallengeMutation,
    ) -> Challenge:
        lock = self._locks.setdefault(challenge_id, asyncio.Lock())
        async with lock:
            if challenge_id in self._failures:
                raise self._failures[challenge_id]
            current = await self.get_challenge(challenge_id)
            if current is None:
                raise ChallengeNotFoundError(challenge_id)

            # Let other coroutines run inside the critical section
            await asyncio.sleep(0)
            updated = await mutate(current)
            if updated == current:
                return current

            self._rows[challenge_id] = challenge_to_db_row(updated)
            self._versions[challenge_id] += 1
            self.commit_count += 1
            return updated

    async def update_challenge_progress(
        self,
        challenge_id: str,
        user_id: str,
        progress: ProgressUpdate,
    ) -> Challenge:
        async def mutate(current: Challenge) -> Challenge:
            return current.with_progress(user_id, progress(current))

        return await self.update_challenge(challenge_id, mutate)
