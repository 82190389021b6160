"""
Domain converters between Supabase rows and the domain models.

All converters are pure functions with no side effects.

Examples:
    >>> from domain.converters import db_row_to_challenge, challenge_to_db_row

    >>> challenge = db_row_to_challenge(row)
    >>> row = challenge_to_db_row(challenge)
"""

from domain.converters.db_converters import (
    challenge_to_db_row,
    db_row_to_challenge,
    db_row_to_trophy,
    db_row_to_workout_summary,
    trophy_to_db_row,
    workout_summary_to_db_row,
)

__all__ = [
    "db_row_to_challenge",
    "challenge_to_db_row",
    "db_row_to_workout_summary",
    "workout_summary_to_db_row",
    "db_row_to_trophy",
    "trophy_to_db_row",
]
