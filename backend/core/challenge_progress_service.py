"""
Challenge Progress Service.

Evaluates every active challenge of a user against a newly logged workout:

    calculate contribution -> transactional progress write -> award on completion

Challenges are processed one at a time. Each challenge is isolated: a failure
while calculating, writing or awarding is logged and recorded on that
challenge's outcome, and the remaining challenges are still processed.
"""
from dataclasses import dataclass, field
from typing import List, Optional
import logging

from application.exceptions import ChallengeNotFoundError, ChallengeValidationError
from application.ports import ChallengeRepository, Clock
from backend.core.award_dispatcher import AwardDispatcher
from backend.core.progress_aggregator import ProgressAggregator
from backend.core.progress_calculator import ProgressCalculator
from domain.models import Challenge, ChallengeScope, Trophy, WorkoutSummary

logger = logging.getLogger(__name__)


# =============================================================================
# Result DTOs
# =============================================================================


@dataclass
class ChallengeOutcome:
    """What one workout did to one challenge."""

    challenge_id: str
    contribution: float = 0.0
    new_total: Optional[float] = None
    completed: bool = False
    trophies: List[Trophy] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def updated(self) -> bool:
        return self.new_total is not None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class WorkoutProgressReport:
    """Result of tracking one workout across a user's active challenges."""

    workout_id: str
    user_id: str
    outcomes: List[ChallengeOutcome] = field(default_factory=list)

    @property
    def trophies(self) -> List[Trophy]:
        return [t for o in self.outcomes for t in o.trophies]

    @property
    def failed(self) -> List[ChallengeOutcome]:
        return [o for o in self.outcomes if not o.success]


# =============================================================================
# Challenge Progress Service
# =============================================================================


class ChallengeProgressService:
    """
    Stateless progress engine.

    All collaborators are injected, so one instance can serve concurrent
    invocations; consistency between them is the repository's transaction.
    """

    def __init__(
        self,
        challenge_repo: ChallengeRepository,
        calculator: ProgressCalculator,
        aggregator: ProgressAggregator,
        dispatcher: AwardDispatcher,
        clock: Clock,
    ):
        self._challenge_repo = challenge_repo
        self._calculator = calculator
        self._aggregator = aggregator
        self._dispatcher = dispatcher
        self._clock = clock

    async def track_workout_progress(
        self,
        workout: WorkoutSummary,
        user_id: Optional[str] = None,
    ) -> WorkoutProgressReport:
        """
        Apply a newly logged workout to the user's active challenges.

        Args:
            workout: The saved workout
            user_id: Contributing user (defaults to the workout owner)

        Returns:
            WorkoutProgressReport with one outcome per active challenge

        Raises:
            ChallengeValidationError: If no user identity is available
        """
        user_id = user_id or workout.user_id
        if not user_id:
            raise ChallengeValidationError("User ID is required", field="user_id")

        challenges = await self._challenge_repo.get_active_challenges(
            user_id, now=self._clock.now()
        )
        logger.info(
            "Tracking workout %s for user %s across %d active challenges",
            workout.id,
            user_id,
            len(challenges),
        )

        report = WorkoutProgressReport(workout_id=workout.id, user_id=user_id)
        for challenge in challenges:
            try:
                outcome = await self._process_challenge(workout, challenge, user_id)
            except Exception as e:
                logger.exception(
                    "Failed to process challenge %s for workout %s",
                    challenge.id,
                    workout.id,
                )
                outcome = ChallengeOutcome(challenge_id=challenge.id, error=str(e))
            report.outcomes.append(outcome)

        if report.failed:
            logger.warning(
                "Workout %s: %d of %d challenges failed",
                workout.id,
                len(report.failed),
                len(report.outcomes),
            )
        return report

    async def _process_challenge(
        self,
        workout: WorkoutSummary,
        challenge: Challenge,
        user_id: str,
    ) -> ChallengeOutcome:
        contribution = await self._calculator.compute_contribution(workout, challenge)
        outcome = ChallengeOutcome(challenge_id=challenge.id, contribution=contribution)
        if contribution <= 0:
            logger.debug("No progress for challenge %s", challenge.id)
            return outcome

        committed = await self._challenge_repo.update_challenge_progress(
            challenge.id,
            user_id,
            lambda current: self._aggregator.merged_progress(current, user_id, contribution),
        )
        outcome.new_total = committed.progress_for_user(user_id)
        outcome.completed = self._aggregator.is_completed(committed, user_id)
        logger.info(
            "Challenge %s: user %s +%.1f -> %.1f %s",
            challenge.id,
            user_id,
            contribution,
            outcome.new_total,
            challenge.unit,
        )

        if outcome.completed:
            logger.info("Challenge %s completed by user %s", challenge.id, user_id)
            outcome.trophies = await self._dispatcher.dispatch_award(committed, user_id)
        return outcome

    async def finalize_challenge(self, challenge_id: str) -> List[Trophy]:
        """
        Award a competitive challenge's finishers after it has ended.

        Participants ranked within the cutoff, or who met the goal, receive a
        trophy. Group and cumulative challenges award at completion time, so
        this is a no-op for them.

        Raises:
            ChallengeNotFoundError: If the challenge does not exist
            ChallengeValidationError: If the challenge has not ended yet
        """
        challenge = await self._challenge_repo.get_challenge(challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)
        if not challenge.is_expired(self._clock.now()):
            raise ChallengeValidationError(
                f"Challenge {challenge_id} has not ended", field="end_date"
            )
        if challenge.scope is not ChallengeScope.COMPETITIVE:
            return []

        trophies: List[Trophy] = []
        for entry in challenge.leaderboard():
            trophies.extend(await self._dispatcher.dispatch_award(challenge, entry.user_id))
        return trophies
