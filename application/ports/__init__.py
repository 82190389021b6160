"""
Repository Interfaces (Ports) for the challenge engine.

This package defines abstract interfaces that decouple the progress engine
from infrastructure (database, event delivery, time). Implementations are
provided in the infrastructure layer and, for tests, in tests/fakes.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ChallengeRepository, TrophyRepository

    class AwardDispatcher:
        def __init__(self, trophy_repo: TrophyRepository):
            self._trophy_repo = trophy_repo
"""

# Challenge persistence
from application.ports.challenge_repository import (
    ChallengeMutation,
    ChallengeRepository,
    ProgressUpdate,
)

# Workout history (read-only)
from application.ports.workout_history_repository import WorkoutHistoryRepository

# Trophy persistence
from application.ports.trophy_repository import TrophyRepository

# Events and time
from application.ports.completion_notifier import ChallengeCompletionNotifier, Clock

__all__ = [
    # Challenge
    "ChallengeRepository",
    "ChallengeMutation",
    "ProgressUpdate",
    # Workout history
    "WorkoutHistoryRepository",
    # Trophy
    "TrophyRepository",
    # Events and time
    "ChallengeCompletionNotifier",
    "Clock",
]
