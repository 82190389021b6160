"""
Converters: Database row format <-> domain models.

Provides conversion between Supabase rows and the Challenge, WorkoutSummary
and Trophy domain models. Rows written by the older mobile client use
camelCase keys (startDate, qualifyingMuscles, completions...); both spellings
are accepted on read, snake_case is written.

Database schema (challenges table):
- id, title, description, type, scope, goal, unit
- start_date, end_date: Timestamps
- creator_id, badge_image_url
- qualifying_muscles, participants: Arrays of strings
- completions: JSONB map of user id -> progress
- version: Integer, bumped on every write (optimistic concurrency)

Database schema (workout_summaries table):
- id, user_id, workout_title, duration, total_volume, created_at
- exercises: JSONB list of {exerciseName, targetMuscle, imageUrl, sets, hasPR}

Database schema (trophies table):
- id, user_id, title, description, image_url, date_earned, type
- metadata: JSONB map of string -> string
- challenge_id: copied out of metadata for lookups
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.models import Challenge, ExerciseEntry, SetEntry, Trophy, WorkoutSummary

# "225 lbs × 5 reps" (legacy single top-set field)
_TOP_SET_PATTERN = re.compile(
    r"^\s*(?P<weight>\d+(?:\.\d+)?)\s*(?:lbs?)?\s*[×x]\s*(?P<reps>\d+)\s*(?:reps?)?\s*$"
)


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse datetime from various formats."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        # Handle ISO format with or without timezone
        try:
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _pick(row: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among snake_case/camelCase spellings."""
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


# =============================================================================
# Challenge
# =============================================================================


def db_row_to_challenge(row: Dict[str, Any]) -> Challenge:
    """
    Convert a database row to domain Challenge.

    Raises:
        pydantic.ValidationError: If required fields are missing or invalid.

    Examples:
        >>> row = {
        ...     "id": "c1",
        ...     "title": "Chest Month",
        ...     "type": "volume",
        ...     "scope": "group",
        ...     "goal": 10000,
        ...     "unit": "lbs",
        ...     "start_date": "2025-03-01T00:00:00Z",
        ...     "end_date": "2025-03-31T23:59:59Z",
        ...     "participants": ["u1", "u2"],
        ...     "completions": {"u1": 1800},
        ... }
        >>> db_row_to_challenge(row).progress_for_user("u1")
        1800.0
    """
    return Challenge.model_validate({
        "id": row.get("id"),
        "title": row.get("title"),
        "description": row.get("description") or "",
        "type": row.get("type"),
        "scope": row.get("scope") or "competitive",
        "goal": row.get("goal"),
        "unit": row.get("unit") or "",
        "start_date": _parse_datetime(_pick(row, "start_date", "startDate")),
        "end_date": _parse_datetime(_pick(row, "end_date", "endDate")),
        "creator_id": _pick(row, "creator_id", "creatorId"),
        "badge_image_url": _pick(row, "badge_image_url", "badgeImageUrl"),
        "qualifying_muscles": _pick(row, "qualifying_muscles", "qualifyingMuscles", default=[]),
        "participants": row.get("participants") or [],
        "progress": _pick(row, "completions", "progress", default={}),
    })


def challenge_to_db_row(challenge: Challenge) -> Dict[str, Any]:
    """Convert domain Challenge to database row format (without version)."""
    return {
        "id": challenge.id,
        "title": challenge.title,
        "description": challenge.description,
        "type": challenge.type.value,
        "scope": challenge.scope.value,
        "goal": challenge.goal,
        "unit": challenge.unit,
        "start_date": challenge.start_date.isoformat(),
        "end_date": challenge.end_date.isoformat(),
        "creator_id": challenge.creator_id,
        "badge_image_url": challenge.badge_image_url,
        "qualifying_muscles": list(challenge.qualifying_muscles),
        "participants": list(challenge.participants),
        "completions": dict(challenge.progress),
    }


# =============================================================================
# Workout summary
# =============================================================================


def _parse_sets(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    sets = raw.get("sets")
    if isinstance(sets, list):
        return [
            {
                "weight": s.get("weight", 0),
                "reps": s.get("reps", 0),
                "is_pr": _pick(s, "is_pr", "isPR", default=False),
            }
            for s in sets
        ]

    # Legacy rows only carry a "topSet" display string
    top_set = _pick(raw, "top_set", "topSet")
    if isinstance(top_set, str):
        match = _TOP_SET_PATTERN.match(top_set)
        if match:
            return [{"weight": float(match["weight"]), "reps": int(match["reps"])}]
    return []


def _parse_exercise(raw: Dict[str, Any]) -> ExerciseEntry:
    return ExerciseEntry(
        exercise_name=_pick(raw, "exercise_name", "exerciseName"),
        target_muscle=_pick(raw, "target_muscle", "targetMuscle", default="Unknown"),
        image_url=_pick(raw, "image_url", "imageUrl"),
        sets=[SetEntry(**s) for s in _parse_sets(raw)],
        has_pr=_pick(raw, "has_pr", "hasPR", default=False),
    )


def db_row_to_workout_summary(row: Dict[str, Any]) -> WorkoutSummary:
    """
    Convert a database row to domain WorkoutSummary.

    Raises:
        pydantic.ValidationError: If required fields are missing or invalid.
    """
    return WorkoutSummary(
        id=row.get("id"),
        user_id=_pick(row, "user_id", "userId"),
        created_at=_parse_datetime(_pick(row, "created_at", "createdAt", "date")),
        title=_pick(row, "workout_title", "workoutTitle", "title"),
        duration=row.get("duration") or 0,
        total_volume=_pick(row, "total_volume", "totalVolume", default=0),
        exercises=[_parse_exercise(e) for e in row.get("exercises") or []],
    )


def workout_summary_to_db_row(workout: WorkoutSummary) -> Dict[str, Any]:
    """Convert domain WorkoutSummary to database row format."""
    return {
        "id": workout.id,
        "user_id": workout.user_id,
        "workout_title": workout.title,
        "created_at": workout.created_at.isoformat(),
        "duration": workout.duration,
        "total_volume": workout.total_volume,
        "exercises": [
            {
                "exerciseName": e.exercise_name,
                "targetMuscle": e.target_muscle,
                "imageUrl": e.image_url,
                "hasPR": e.has_pr,
                "sets": [
                    {"weight": s.weight, "reps": s.reps, "isPR": s.is_pr} for s in e.sets
                ],
            }
            for e in workout.exercises
        ],
    }


# =============================================================================
# Trophy
# =============================================================================


def db_row_to_trophy(row: Dict[str, Any]) -> Trophy:
    """Convert a database row to domain Trophy."""
    return Trophy(
        id=row.get("id"),
        user_id=_pick(row, "user_id", "userId"),
        title=row.get("title") or "",
        description=row.get("description") or "",
        image_url=_pick(row, "image_url", "imageUrl"),
        date_earned=_parse_datetime(_pick(row, "date_earned", "dateEarned")),
        type=row.get("type") or "challenge",
        metadata=row.get("metadata") or {},
    )


def trophy_to_db_row(trophy: Trophy) -> Dict[str, Any]:
    """Convert domain Trophy to database row format."""
    return {
        "id": trophy.id,
        "user_id": trophy.user_id,
        "title": trophy.title,
        "description": trophy.description,
        "image_url": trophy.image_url,
        "date_earned": trophy.date_earned.isoformat(),
        "type": trophy.type.value,
        "metadata": dict(trophy.metadata),
        "challenge_id": trophy.challenge_id,
    }
