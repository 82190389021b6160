"""
Domain layer for the challenge engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, transport, external services).
"""

from domain.models import (
    Challenge,
    ChallengeScope,
    ChallengeType,
    ExerciseEntry,
    LeaderboardEntry,
    SetEntry,
    Trophy,
    TrophyType,
    WorkoutSummary,
)

__all__ = [
    "Challenge",
    "ChallengeScope",
    "ChallengeType",
    "ExerciseEntry",
    "LeaderboardEntry",
    "SetEntry",
    "Trophy",
    "TrophyType",
    "WorkoutSummary",
]
