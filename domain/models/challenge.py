"""
Challenge aggregate.

A challenge is a time-bounded goal shared by its participants. Each
participant has a stored progress value; how those values combine is decided
by the challenge scope.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.models.timestamps import ensure_utc
from domain.models.workout import ExerciseEntry


class ChallengeType(str, Enum):
    """
    What a workout contributes to a challenge.

    VOLUME, TIME, ONE_REP_MAX and PERSONAL_RECORD are the current taxonomy.
    DURATION, DISTANCE and COUNT come from the earlier rule set and are kept
    so stored challenges still load; new challenges should not use them.
    """

    VOLUME = "volume"
    TIME = "time"
    ONE_REP_MAX = "one_rep_max"
    PERSONAL_RECORD = "personal_record"

    # Deprecated
    DURATION = "duration"
    DISTANCE = "distance"
    COUNT = "count"

    @property
    def is_deprecated(self) -> bool:
        return self in _DEPRECATED_TYPES

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


_DEPRECATED_TYPES = frozenset(
    {ChallengeType.DURATION, ChallengeType.DISTANCE, ChallengeType.COUNT}
)


class ChallengeScope(str, Enum):
    """
    How participants' progress combines.

    GROUP: cooperative, per-user sums feed one shared total.
    COMPETITIVE: each participant keeps their best single contribution.
    CUMULATIVE: deprecated pure-summation rule, each user chases the goal alone.
    """

    GROUP = "group"
    COMPETITIVE = "competitive"
    CUMULATIVE = "cumulative"

    @property
    def is_deprecated(self) -> bool:
        return self is ChallengeScope.CUMULATIVE


class LeaderboardEntry(BaseModel):
    """A ranked participant."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    progress: float
    rank: int = Field(..., ge=1)


class Challenge(BaseModel):
    """
    Challenge definition plus per-participant progress.

    `progress` maps participant id to that participant's stored value. For
    group and cumulative scopes it is a running sum; for competitive scope it
    is the best single contribution recorded.

    Examples:
        >>> challenge = Challenge(
        ...     id="c1",
        ...     title="Chest Month",
        ...     type=ChallengeType.VOLUME,
        ...     scope=ChallengeScope.GROUP,
        ...     goal=10000,
        ...     unit="lbs",
        ...     start_date=datetime(2025, 3, 1),
        ...     end_date=datetime(2025, 3, 31),
        ...     creator_id="u1",
        ...     qualifying_muscles=["chest"],
        ... )
        >>> challenge.participants
        ['u1']
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    type: ChallengeType
    scope: ChallengeScope = ChallengeScope.COMPETITIVE
    goal: float = Field(..., gt=0)
    unit: str = ""
    start_date: datetime
    end_date: datetime
    creator_id: Optional[str] = None
    badge_image_url: Optional[str] = None
    qualifying_muscles: List[str] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    progress: Dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def include_creator(cls, data: Any) -> Any:
        """The creator always participates."""
        if isinstance(data, dict) and data.get("creator_id"):
            participants = list(data.get("participants") or [])
            if data["creator_id"] not in participants:
                participants.append(data["creator_id"])
            data = {**data, "participants": participants}
        return data

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_challenge(self) -> "Challenge":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        if any(value < 0 for value in self.progress.values()):
            raise ValueError("progress values must be non-negative")
        return self

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def progress_for_user(self, user_id: str) -> float:
        return self.progress.get(user_id, 0.0)

    def progress_percentage(self, user_id: str) -> float:
        return self.progress_for_user(user_id) / self.goal * 100

    def is_completed_by_user(self, user_id: str) -> bool:
        return self.progress_for_user(user_id) >= self.goal

    @property
    def total_progress(self) -> float:
        """
        Challenge-wide progress.

        Group and cumulative challenges sum every participant's stored value.
        Competitive challenges report the leader's value.
        """
        if not self.progress:
            return 0.0
        if self.scope is ChallengeScope.COMPETITIVE:
            return max(self.progress.values())
        return sum(self.progress.values())

    def with_progress(self, user_id: str, value: float) -> "Challenge":
        """Return a copy with one participant's stored value replaced."""
        return self.model_copy(update={"progress": {**self.progress, user_id: value}})

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def contains(self, moment: datetime) -> bool:
        """True when `moment` falls inside [start_date, end_date]."""
        return self.start_date <= ensure_utc(moment) <= self.end_date

    def is_active(self, now: datetime) -> bool:
        return self.contains(now)

    def is_expired(self, now: datetime) -> bool:
        return ensure_utc(now) > self.end_date

    # ------------------------------------------------------------------
    # Membership and filtering
    # ------------------------------------------------------------------

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def exercise_qualifies(self, exercise: ExerciseEntry) -> bool:
        """Exact tag match against the exercise's single target muscle."""
        if not self.qualifying_muscles:
            return True
        return exercise.target_muscle in self.qualifying_muscles

    # ------------------------------------------------------------------
    # Ranking and awards
    # ------------------------------------------------------------------

    def leaderboard(self) -> List[LeaderboardEntry]:
        """Participants with a progress entry, best first, ties by user id."""
        ordered = sorted(self.progress.items(), key=lambda item: (-item[1], item[0]))
        return [
            LeaderboardEntry(user_id=user_id, progress=value, rank=index + 1)
            for index, (user_id, value) in enumerate(ordered)
        ]

    def rank_for(self, user_id: str) -> Optional[int]:
        for entry in self.leaderboard():
            if entry.user_id == user_id:
                return entry.rank
        return None

    def should_award_trophy(self, user_id: str, now: datetime) -> bool:
        """
        Whether the challenge state entitles `user_id` to a trophy.

        Group: the shared total has reached the goal.
        Competitive: the user reached the goal, or the challenge is over and
        the user is on the leaderboard (rank gating happens in the dispatcher).
        Cumulative: the user reached the goal.
        """
        if not self.is_participant(user_id):
            return False
        if self.scope is ChallengeScope.GROUP:
            return self.total_progress >= self.goal
        if self.scope is ChallengeScope.COMPETITIVE:
            if self.is_completed_by_user(user_id):
                return True
            return self.is_expired(now) and self.rank_for(user_id) is not None
        return self.is_completed_by_user(user_id)

    @property
    def goal_label(self) -> str:
        """Goal with unit, e.g. "5000 lbs"."""
        goal = int(self.goal) if float(self.goal).is_integer() else self.goal
        return f"{goal} {self.unit}".strip()
