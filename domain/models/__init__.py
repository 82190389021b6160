"""
Domain models for the challenge engine.

These models are independent of infrastructure concerns (database, transport):
- WorkoutSummary: a completed workout, read-only input
- Challenge: the shared goal and its per-participant progress
- Trophy: the award written when a challenge is completed

Usage:
    >>> from domain.models import Challenge, WorkoutSummary, Trophy

    >>> challenge = Challenge.model_validate_json(payload)
    >>> challenge.rank_for("user-1")
"""

from domain.models.challenge import (
    Challenge,
    ChallengeScope,
    ChallengeType,
    LeaderboardEntry,
)
from domain.models.trophy import Trophy, TrophyType
from domain.models.workout import ExerciseEntry, SetEntry, WorkoutSummary

__all__ = [
    # Main entities
    "WorkoutSummary",
    "ExerciseEntry",
    "SetEntry",
    "Challenge",
    "LeaderboardEntry",
    "Trophy",
    # Enums
    "ChallengeType",
    "ChallengeScope",
    "TrophyType",
]
