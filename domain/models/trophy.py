"""
Trophy award record.

Trophies are written once when a challenge is completed and never changed
afterwards.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TrophyType(str, Enum):
    CHALLENGE = "challenge"
    ACHIEVEMENT = "achievement"
    MILESTONE = "milestone"


class Trophy(BaseModel):
    """
    An award issued to one user.

    For challenge trophies `metadata` carries at least `challengeId`, `goal`
    (goal and unit, e.g. "5000 lbs") and `scope`; competitive awards also
    carry the recipient's `rank`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    title: str
    description: str = ""
    image_url: Optional[str] = None
    date_earned: datetime
    type: TrophyType = TrophyType.CHALLENGE
    metadata: Dict[str, str] = Field(default_factory=dict)

    @property
    def challenge_id(self) -> Optional[str]:
        return self.metadata.get("challengeId")
