"""
ChallengeMembership Use Case.

Joining a challenge seeds the new participant's progress from the workouts
they already logged inside the challenge window. The seed is computed inside
the same transaction callback as the membership write, against the snapshot
being committed, so it can never be merged into a stale document or counted
twice by a retried transaction.

Consistency note: the transaction guards the challenge document, not the
workout history. A workout saved after the history read but before the join
commits is not in the seed, and the progress engine only sees the challenge
once the join is committed. Such a workout is picked up on the next join or
not at all; we accept that window rather than lock workout writes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from application.exceptions import ChallengeValidationError
from application.ports import ChallengeRepository, WorkoutHistoryRepository
from backend.core.progress_aggregator import ProgressAggregator
from backend.core.progress_calculator import ProgressCalculator
from domain.models import Challenge

logger = logging.getLogger(__name__)


@dataclass
class MembershipResult:
    """Result of a join/leave."""

    challenge: Challenge
    is_member: bool
    changed: bool
    initial_progress: Optional[float] = None


class ChallengeMembershipUseCase:
    """
    Join and leave challenges.

    Dependencies are injected via constructor for testability.
    """

    def __init__(
        self,
        challenge_repo: ChallengeRepository,
        history_repo: WorkoutHistoryRepository,
        calculator: ProgressCalculator,
        aggregator: ProgressAggregator,
    ) -> None:
        self._challenge_repo = challenge_repo
        self._history_repo = history_repo
        self._calculator = calculator
        self._aggregator = aggregator

    async def join(self, challenge_id: str, user_id: str) -> MembershipResult:
        """
        Add `user_id` to a challenge with progress from past workouts.

        Joining twice is a no-op.

        Raises:
            ChallengeValidationError: If user_id is missing
            ChallengeNotFoundError: If the challenge does not exist
        """
        self._require_user(user_id)
        state = {"changed": False, "seed": None}

        async def mutate(current: Challenge) -> Challenge:
            state["changed"] = False
            state["seed"] = None
            if current.is_participant(user_id):
                return current

            seed = await self._initial_progress(current, user_id)
            updated = current.model_copy(
                update={"participants": [*current.participants, user_id]}
            )
            if seed > 0:
                updated = updated.with_progress(user_id, seed)
            state["changed"] = True
            state["seed"] = seed
            return updated

        committed = await self._challenge_repo.update_challenge(challenge_id, mutate)
        if state["changed"]:
            logger.info(
                "User %s joined challenge %s with initial progress %.1f",
                user_id,
                challenge_id,
                state["seed"],
            )
        return MembershipResult(
            challenge=committed,
            is_member=True,
            changed=state["changed"],
            initial_progress=state["seed"],
        )

    async def leave(self, challenge_id: str, user_id: str) -> MembershipResult:
        """
        Remove `user_id` and their progress entry from a challenge.

        Raises:
            ChallengeValidationError: If user_id is missing or is the creator
            ChallengeNotFoundError: If the challenge does not exist
        """
        self._require_user(user_id)
        state = {"changed": False}

        async def mutate(current: Challenge) -> Challenge:
            if current.creator_id == user_id:
                raise ChallengeValidationError(
                    "The creator cannot leave their challenge", field="user_id"
                )
            state["changed"] = current.is_participant(user_id)
            if not state["changed"]:
                return current
            progress = {k: v for k, v in current.progress.items() if k != user_id}
            return current.model_copy(
                update={
                    "participants": [p for p in current.participants if p != user_id],
                    "progress": progress,
                }
            )

        committed = await self._challenge_repo.update_challenge(challenge_id, mutate)
        if state["changed"]:
            logger.info(f"User {user_id} left challenge {challenge_id}")
        return MembershipResult(
            challenge=committed, is_member=False, changed=state["changed"]
        )

    async def toggle(self, challenge_id: str, user_id: str) -> MembershipResult:
        """Join if not a participant, otherwise leave."""
        self._require_user(user_id)
        challenge = await self._challenge_repo.get_challenge(challenge_id)
        if challenge is not None and challenge.is_participant(user_id):
            return await self.leave(challenge_id, user_id)
        return await self.join(challenge_id, user_id)

    async def _initial_progress(self, challenge: Challenge, user_id: str) -> float:
        """Fold past in-window workouts through the challenge's scope policy."""
        workouts = await self._history_repo.get_workout_history(
            user_id, since=challenge.start_date
        )
        total = 0.0
        seeded = challenge
        for workout in workouts:
            if not challenge.contains(workout.created_at):
                continue
            contribution = await self._calculator.compute_contribution(workout, challenge)
            if contribution <= 0:
                continue
            total = self._aggregator.merged_progress(seeded, user_id, contribution)
            seeded = seeded.with_progress(user_id, total)
        return total

    @staticmethod
    def _require_user(user_id: str) -> None:
        if not user_id:
            raise ChallengeValidationError("User ID is required", field="user_id")
