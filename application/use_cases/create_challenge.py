"""
CreateChallenge Use Case.

Validates a new challenge definition and persists it. The creator is always
enrolled as the first participant.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from application.exceptions import ChallengeValidationError
from application.ports import ChallengeRepository
from domain.models import Challenge, ChallengeScope, ChallengeType

logger = logging.getLogger(__name__)


@dataclass
class CreateChallengeRequest:
    """Fields a user supplies when creating a challenge."""

    creator_id: str
    title: str
    type: ChallengeType
    goal: float
    unit: str
    start_date: datetime
    end_date: datetime
    scope: ChallengeScope = ChallengeScope.COMPETITIVE
    description: str = ""
    qualifying_muscles: Optional[List[str]] = None
    badge_image_url: Optional[str] = None


class CreateChallengeUseCase:
    """
    Use case for creating challenges.

    Usage:
        >>> use_case = CreateChallengeUseCase(challenge_repo=repo)
        >>> challenge = await use_case.execute(request)
    """

    def __init__(self, challenge_repo: ChallengeRepository) -> None:
        self._challenge_repo = challenge_repo

    async def execute(self, request: CreateChallengeRequest) -> Challenge:
        """
        Validate and persist a challenge.

        Raises:
            ChallengeValidationError: If the request is incomplete or inconsistent
        """
        if not request.creator_id:
            raise ChallengeValidationError("Creator ID is required", field="creator_id")
        if request.goal <= 0:
            raise ChallengeValidationError("Goal must be positive", field="goal")
        if request.end_date < request.start_date:
            raise ChallengeValidationError(
                "End date must not precede start date", field="end_date"
            )
        if request.type.is_deprecated:
            logger.warning(f"Creating challenge with deprecated type: {request.type.value}")

        try:
            challenge = Challenge(
                id=str(uuid.uuid4()),
                title=request.title,
                description=request.description,
                type=request.type,
                scope=request.scope,
                goal=request.goal,
                unit=request.unit,
                start_date=request.start_date,
                end_date=request.end_date,
                creator_id=request.creator_id,
                badge_image_url=request.badge_image_url,
                qualifying_muscles=request.qualifying_muscles or [],
            )
        except ValidationError as e:
            raise ChallengeValidationError(f"Invalid challenge: {e}") from e

        saved = await self._challenge_repo.create_challenge(challenge)
        logger.info(f"Created challenge {saved.id} '{saved.title}'")
        return saved
