"""
Infrastructure Layer for the challenge progress engine.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    SupabaseChallengeRepository,
    SupabaseWorkoutHistoryRepository,
    SupabaseTrophyRepository,
)

__all__ = [
    "SupabaseChallengeRepository",
    "SupabaseWorkoutHistoryRepository",
    "SupabaseTrophyRepository",
]
