"""
Progress Calculator for challenge tracking.

Maps a (workout, challenge) pair to a non-negative contribution:
- Volume: weight x reps over qualifying exercises
- Time: the whole workout duration if any exercise qualifies
- One-rep max: best Brzycki estimate in the workout
- Personal record: number of qualifying exercises beating the user's history

Only the personal-record branch performs I/O (it reads workout history), so
`compute_contribution` is a coroutine. The other strategies are plain
functions in the strategy table and can be called directly.
"""
from typing import Callable, Dict, List, Optional, Tuple
import logging

from application.ports import WorkoutHistoryRepository
from backend.core.one_rep_max import best_estimated_1rm
from domain.models import Challenge, ChallengeType, ExerciseEntry, WorkoutSummary

logger = logging.getLogger(__name__)

DEFAULT_PR_MAX_REPS = 10

Strategy = Callable[[WorkoutSummary, Challenge], float]


# =============================================================================
# Pure strategies
# =============================================================================


def qualifying_exercises(
    workout: WorkoutSummary,
    challenge: Challenge,
) -> List[ExerciseEntry]:
    """Exercises whose target muscle passes the challenge filter."""
    return [e for e in workout.exercises if challenge.exercise_qualifies(e)]


def volume_contribution(workout: WorkoutSummary, challenge: Challenge) -> float:
    """
    Sum of weight x reps over qualifying exercises.

    An unrestricted challenge takes the workout's stored total volume as is.
    """
    if not challenge.qualifying_muscles:
        return float(workout.total_volume)
    return sum(e.volume for e in qualifying_exercises(workout, challenge))


def duration_contribution(workout: WorkoutSummary, challenge: Challenge) -> float:
    """All or nothing: one qualifying exercise credits the full duration."""
    if not challenge.qualifying_muscles or qualifying_exercises(workout, challenge):
        return float(workout.duration)
    return 0.0


def one_rep_max_contribution(workout: WorkoutSummary, challenge: Challenge) -> float:
    """Best estimated 1RM across all qualifying sets (not a sum)."""
    best = best_estimated_1rm(
        s for e in qualifying_exercises(workout, challenge) for s in e.sets
    )
    return best or 0.0


def count_contribution(workout: WorkoutSummary, challenge: Challenge) -> float:
    """Deprecated COUNT type: 1 per qualifying workout."""
    if not challenge.qualifying_muscles or qualifying_exercises(workout, challenge):
        return 1.0
    return 0.0


def distance_contribution(workout: WorkoutSummary, challenge: Challenge) -> float:
    """Deprecated DISTANCE type: summaries carry no distance, so nothing counts."""
    return 0.0


STRATEGIES: Dict[ChallengeType, Strategy] = {
    ChallengeType.VOLUME: volume_contribution,
    ChallengeType.TIME: duration_contribution,
    ChallengeType.ONE_REP_MAX: one_rep_max_contribution,
    # Deprecated taxonomy
    ChallengeType.DURATION: duration_contribution,
    ChallengeType.COUNT: count_contribution,
    ChallengeType.DISTANCE: distance_contribution,
}


# =============================================================================
# Progress Calculator
# =============================================================================


class ProgressCalculator:
    """
    Computes a workout's contribution to a challenge.

    Dispatches on challenge type through STRATEGIES; PERSONAL_RECORD is
    handled here because it needs the user's workout history.
    """

    def __init__(
        self,
        history_repo: WorkoutHistoryRepository,
        *,
        pr_max_reps: int = DEFAULT_PR_MAX_REPS,
        strategies: Optional[Dict[ChallengeType, Strategy]] = None,
    ):
        """
        Initialize the calculator.

        Args:
            history_repo: Repository for the user's past workouts
            pr_max_reps: Highest rep count trusted for PR estimates
            strategies: Override or extend the strategy table
        """
        self._history_repo = history_repo
        self._pr_max_reps = pr_max_reps
        self._strategies = {**STRATEGIES, **(strategies or {})}

    async def compute_contribution(
        self,
        workout: WorkoutSummary,
        challenge: Challenge,
    ) -> float:
        """
        Compute the contribution of `workout` to `challenge`.

        Returns 0 when the workout falls outside [start_date, end_date]
        (inclusive at both ends).

        Args:
            workout: Completed workout
            challenge: Challenge being evaluated

        Returns:
            Non-negative contribution
        """
        if not challenge.contains(workout.created_at):
            logger.debug(
                "Workout %s at %s is outside challenge %s range",
                workout.id,
                workout.created_at.isoformat(),
                challenge.id,
            )
            return 0.0

        if challenge.type.is_deprecated:
            logger.warning(
                "Challenge %s uses deprecated type '%s'",
                challenge.id,
                challenge.type.value,
            )

        if challenge.type is ChallengeType.PERSONAL_RECORD:
            contribution = await self._personal_record_contribution(workout, challenge)
        else:
            strategy = self._strategies.get(challenge.type)
            if strategy is None:
                logger.warning(f"No progress strategy for type: {challenge.type.value}")
                return 0.0
            contribution = strategy(workout, challenge)

        return max(contribution, 0.0)

    async def _personal_record_contribution(
        self,
        workout: WorkoutSummary,
        challenge: Challenge,
    ) -> float:
        """
        Count qualifying exercises whose best 1RM beats the user's history.

        History is read once and every exercise is checked against it before
        the count is returned.
        """
        candidates: List[Tuple[Tuple[str, str], float]] = []
        for exercise in qualifying_exercises(workout, challenge):
            best = best_estimated_1rm(exercise.sets, max_reps=self._pr_max_reps)
            if best is not None:
                candidates.append(((exercise.exercise_name, exercise.target_muscle), best))

        if not candidates:
            return 0.0

        history = await self._history_repo.get_workout_history(
            workout.user_id,
            before=workout.created_at,
        )
        historical_best = self._historical_bests(history, workout)

        count = 0
        for key, best in candidates:
            previous = historical_best.get(key, 0.0)
            if best > previous:
                logger.debug(
                    "PR on %s (%s): %.1f > %.1f", key[0], key[1], best, previous
                )
                count += 1
        return float(count)

    def _historical_bests(
        self,
        history: List[WorkoutSummary],
        workout: WorkoutSummary,
    ) -> Dict[Tuple[str, str], float]:
        """Best 1RM per (exercise name, target muscle) from earlier workouts."""
        bests: Dict[Tuple[str, str], float] = {}
        for past in history:
            if past.id == workout.id or past.created_at >= workout.created_at:
                continue
            for exercise in past.exercises:
                best = best_estimated_1rm(exercise.sets, max_reps=self._pr_max_reps)
                if best is None:
                    continue
                key = (exercise.exercise_name, exercise.target_muscle)
                if best > bests.get(key, 0.0):
                    bests[key] = best
        return bests
