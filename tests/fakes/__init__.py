"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of the engine's ports
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeChallengeRepository, make_challenge

    # Direct instantiation
    repo = FakeChallengeRepository()
    repo.seed([make_challenge(id="c1", participants=["u1"])])

    # Factory function with pre-populated data
    repo = create_history_repo([make_workout(user_id="u1")])
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid

from domain.models import (
    Challenge,
    ChallengeScope,
    ChallengeType,
    ExerciseEntry,
    SetEntry,
    WorkoutSummary,
)

# Import all fake implementations
from tests.fakes.challenge_repository import FakeChallengeRepository
from tests.fakes.workout_history_repository import FakeWorkoutHistoryRepository
from tests.fakes.trophy_repository import FakeTrophyRepository
from tests.fakes.completion_notifier import FixedClock, RecordingCompletionNotifier


MARCH_START = datetime(2025, 3, 1, tzinfo=timezone.utc)
MARCH_END = datetime(2025, 3, 31, 23, 59, 59, tzinfo=timezone.utc)


# =============================================================================
# Model builders
# =============================================================================


def make_exercise(
    name: str = "Bench Press",
    muscle: str = "chest",
    sets: Sequence[Tuple[float, int]] = ((100, 10),),
) -> ExerciseEntry:
    """
    Build an exercise from (weight, reps) pairs.

    Example:
        >>> make_exercise("Squat", "legs", [(225, 5), (225, 5)])
    """
    return ExerciseEntry(
        exercise_name=name,
        target_muscle=muscle,
        sets=[SetEntry(weight=w, reps=r) for w, r in sets],
    )


def make_workout(
    *,
    id: Optional[str] = None,
    user_id: str = "u1",
    created_at: datetime = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc),
    duration: float = 45,
    total_volume: Optional[float] = None,
    exercises: Optional[List[ExerciseEntry]] = None,
) -> WorkoutSummary:
    """
    Build a WorkoutSummary. total_volume defaults to the exercises' volume.
    """
    exercises = exercises if exercises is not None else [make_exercise()]
    if total_volume is None:
        total_volume = sum(e.volume for e in exercises)
    return WorkoutSummary(
        id=id or str(uuid.uuid4()),
        user_id=user_id,
        created_at=created_at,
        title="Test Workout",
        duration=duration,
        total_volume=total_volume,
        exercises=exercises,
    )


def make_challenge(**overrides: Any) -> Challenge:
    """
    Build a March 2025 competitive volume challenge, with overrides.

    Example:
        >>> make_challenge(scope=ChallengeScope.GROUP, goal=100, participants=["u1", "u2"])
    """
    fields: Dict[str, Any] = {
        "id": "c1",
        "title": "March Volume",
        "description": "Lift as much as you can",
        "type": ChallengeType.VOLUME,
        "scope": ChallengeScope.COMPETITIVE,
        "goal": 10000,
        "unit": "lbs",
        "start_date": MARCH_START,
        "end_date": MARCH_END,
        "participants": ["u1"],
    }
    fields.update(overrides)
    return Challenge(**fields)


# =============================================================================
# Factory Functions
# =============================================================================


def create_challenge_repo(
    challenges: Optional[List[Challenge]] = None,
) -> FakeChallengeRepository:
    """
    Create a FakeChallengeRepository with optional pre-populated challenges.

    Args:
        challenges: Challenges to seed

    Returns:
        Pre-populated FakeChallengeRepository
    """
    repo = FakeChallengeRepository()
    if challenges:
        repo.seed(challenges)
    return repo


def create_history_repo(
    workouts: Optional[List[WorkoutSummary]] = None,
) -> FakeWorkoutHistoryRepository:
    """
    Create a FakeWorkoutHistoryRepository with optional saved workouts.

    Args:
        workouts: Workouts to seed (any users)

    Returns:
        Pre-populated FakeWorkoutHistoryRepository
    """
    repo = FakeWorkoutHistoryRepository()
    if workouts:
        repo.seed(workouts)
    return repo


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Fake implementations
    "FakeChallengeRepository",
    "FakeWorkoutHistoryRepository",
    "FakeTrophyRepository",
    "RecordingCompletionNotifier",
    "FixedClock",
    # Builders
    "MARCH_START",
    "MARCH_END",
    "make_exercise",
    "make_workout",
    "make_challenge",
    # Factory functions
    "create_challenge_repo",
    "create_history_repo",
]
