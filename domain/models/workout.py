"""
Workout summary value objects.

A WorkoutSummary is the read-only record of one completed workout as it is
stored after the user saves it. The challenge engine only reads it.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.models.timestamps import ensure_utc


class SetEntry(BaseModel):
    """
    A single logged set.

    Examples:
        >>> SetEntry(weight=100, reps=10).volume
        1000.0
    """

    model_config = ConfigDict(frozen=True)

    weight: float = Field(default=0.0, ge=0, description="Weight lifted")
    reps: int = Field(default=0, ge=0, description="Repetitions completed")
    is_pr: bool = Field(default=False, description="Flagged as a PR when logged")

    @property
    def volume(self) -> float:
        """Weight x reps for this set."""
        return float(self.weight) * self.reps


class ExerciseEntry(BaseModel):
    """An exercise performed in a workout, tagged with one target muscle."""

    model_config = ConfigDict(frozen=True)

    exercise_name: str = Field(..., min_length=1, description="Exercise display name")
    target_muscle: str = Field(
        default="Unknown",
        description="Single target-muscle tag used for challenge filtering",
    )
    image_url: Optional[str] = Field(default=None, description="Exercise image")
    sets: List[SetEntry] = Field(default_factory=list)
    has_pr: bool = Field(default=False)

    @property
    def volume(self) -> float:
        """Sum of set volumes."""
        return sum(s.volume for s in self.sets)


class WorkoutSummary(BaseModel):
    """
    Immutable record of one completed workout.

    `duration` is stored in minutes and `total_volume` is the volume the
    client computed when the workout was saved; neither is recomputed here.

    Examples:
        >>> workout = WorkoutSummary(
        ...     id="w1",
        ...     user_id="u1",
        ...     created_at=datetime(2025, 3, 1, 9, 30),
        ...     duration=45,
        ...     total_volume=1800,
        ...     exercises=[
        ...         ExerciseEntry(
        ...             exercise_name="Bench Press",
        ...             target_muscle="chest",
        ...             sets=[SetEntry(weight=100, reps=10), SetEntry(weight=100, reps=8)],
        ...         )
        ...     ],
        ... )
        >>> workout.exercises[0].volume
        1800.0
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1, description="Owning user")
    created_at: datetime
    title: Optional[str] = None
    duration: float = Field(default=0, ge=0, description="Workout length in minutes")
    total_volume: float = Field(default=0, ge=0)
    exercises: List[ExerciseEntry] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def target_muscles(self) -> List[str]:
        """Distinct target muscles in exercise order."""
        seen: List[str] = []
        for exercise in self.exercises:
            if exercise.target_muscle not in seen:
                seen.append(exercise.target_muscle)
        return seen
