"""
Supabase Challenge Repository Implementation.

This module implements the ChallengeRepository protocol using the Supabase
async client.

Transactions are optimistic: each row carries a `version` column. An update
reads the row, applies the caller's mutation, and writes back only where the
version is unchanged. A lost race raises ChallengeWriteConflictError, which is
retried with a fresh read until `max_attempts` is exhausted.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging

from pydantic import ValidationError
from supabase import AsyncClient
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from application.exceptions import ChallengeNotFoundError, ChallengeWriteConflictError
from application.ports import ChallengeMutation, ProgressUpdate
from domain.converters import challenge_to_db_row, db_row_to_challenge
from domain.models import Challenge

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


def _decode_rows(rows: List[Dict[str, Any]]) -> List[Challenge]:
    """Decode rows, skipping (and logging) any that are malformed."""
    challenges: List[Challenge] = []
    for row in rows:
        try:
            challenges.append(db_row_to_challenge(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed challenge %s: %s",
                row.get("id"),
                e.errors(include_url=False),
            )
    return challenges


class SupabaseChallengeRepository:
    """
    Supabase implementation of ChallengeRepository.

    Stores challenges in one table; per-user progress lives in the
    `completions` JSONB column.
    """

    def __init__(
        self,
        client: AsyncClient,
        *,
        table: str = "challenges",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase async client instance (injected)
            table: Challenges table name
            max_attempts: Attempts per transaction before a conflict propagates
        """
        self._client = client
        self._table = table
        self._max_attempts = max_attempts

    async def get_active_challenges(
        self,
        user_id: str,
        *,
        now: datetime,
    ) -> List[Challenge]:
        """Get challenges the user participates in that have not ended."""
        response = await (
            self._client.table(self._table)
            .select("*")
            .contains("participants", [user_id])
            .gt("end_date", now.isoformat())
            .execute()
        )
        return _decode_rows(response.data or [])

    async def get_available_challenges(
        self,
        *,
        now: datetime,
    ) -> List[Challenge]:
        """Get every challenge that has not ended."""
        response = await (
            self._client.table(self._table)
            .select("*")
            .gt("end_date", now.isoformat())
            .order("end_date")
            .execute()
        )
        challenges = _decode_rows(response.data or [])
        logger.debug(f"Returning {len(challenges)} available challenges")
        return challenges

    async def get_challenge(self, challenge_id: str) -> Optional[Challenge]:
        """Get a single challenge, or None if missing or undecodable."""
        row, _ = await self._read(challenge_id)
        if row is None:
            return None
        decoded = _decode_rows([row])
        return decoded[0] if decoded else None

    async def create_challenge(self, challenge: Challenge) -> Challenge:
        """Insert a new challenge at version 0."""
        response = await (
            self._client.table(self._table)
            .insert({**challenge_to_db_row(challenge), "version": 0})
            .execute()
        )
        if response.data:
            return db_row_to_challenge(response.data[0])
        return challenge

    async def update_challenge(
        self,
        challenge_id: str,
        mutate: ChallengeMutation,
    ) -> Challenge:
        """Transactionally read, mutate and write a challenge."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ChallengeWriteConflictError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_random_exponential(multiplier=0.05, max=1),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._update_once(challenge_id, mutate)
        raise AssertionError("unreachable")  # pragma: no cover

    async def update_challenge_progress(
        self,
        challenge_id: str,
        user_id: str,
        progress: ProgressUpdate,
    ) -> Challenge:
        """Transactionally set one participant's progress entry."""

        async def mutate(current: Challenge) -> Challenge:
            return current.with_progress(user_id, progress(current))

        return await self.update_challenge(challenge_id, mutate)

    async def _read(self, challenge_id: str) -> Tuple[Optional[Dict[str, Any]], int]:
        response = await (
            self._client.table(self._table)
            .select("*")
            .eq("id", challenge_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None, 0
        row = response.data[0]
        return row, int(row.get("version") or 0)

    async def _update_once(
        self,
        challenge_id: str,
        mutate: ChallengeMutation,
    ) -> Challenge:
        row, version = await self._read(challenge_id)
        if row is None:
            raise ChallengeNotFoundError(challenge_id)
        try:
            current = db_row_to_challenge(row)
        except ValidationError as e:
            # An undecodable document cannot be updated safely
            raise ChallengeNotFoundError(challenge_id) from e

        updated = await mutate(current)
        if updated == current:
            return current

        payload = {**challenge_to_db_row(updated), "version": version + 1}
        response = await (
            self._client.table(self._table)
            .update(payload)
            .eq("id", challenge_id)
            .eq("version", version)
            .execute()
        )
        if not response.data:
            raise ChallengeWriteConflictError(challenge_id, version)
        return db_row_to_challenge(response.data[0])
