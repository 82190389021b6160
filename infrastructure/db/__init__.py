"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations are injected into the
progress engine and use cases for clean separation of concerns and testability.

Usage:
    from supabase import acreate_client
    from infrastructure.db import (
        SupabaseChallengeRepository,
        SupabaseWorkoutHistoryRepository,
        SupabaseTrophyRepository,
    )

    # Create Supabase client
    client = await acreate_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    challenge_repo = SupabaseChallengeRepository(client, max_attempts=5)
    history_repo = SupabaseWorkoutHistoryRepository(client)
    trophy_repo = SupabaseTrophyRepository(client)
"""

from infrastructure.db.challenge_repository import SupabaseChallengeRepository
from infrastructure.db.workout_history_repository import SupabaseWorkoutHistoryRepository
from infrastructure.db.trophy_repository import SupabaseTrophyRepository

__all__ = [
    # Challenges and per-user progress
    "SupabaseChallengeRepository",

    # Saved workouts (personal-record history, join seeding)
    "SupabaseWorkoutHistoryRepository",

    # Trophies
    "SupabaseTrophyRepository",
]
