"""
Award Dispatcher for completed challenges.

Decides who receives a trophy when a challenge is completed, writes the
trophies, and emits a completion event per trophy.

- Group: every participant is rewarded once the shared total reaches the goal.
- Competitive: only the triggering user, and only when ranked within the
  cutoff or when they met the goal themselves.
- Cumulative (deprecated): only the triggering user.

Non-qualifying users are skipped silently; that is policy, not failure.
"""
from typing import Dict, List, Optional
import logging
import uuid

from application.ports import ChallengeCompletionNotifier, Clock, TrophyRepository
from domain.models import Challenge, ChallengeScope, Trophy, TrophyType

logger = logging.getLogger(__name__)

DEFAULT_RANK_CUTOFF = 3


class AwardDispatcher:
    """
    Issues challenge trophies.

    Re-awarding is not guarded by default: triggering the same completion
    twice writes two trophies. Enable `dedupe` to consult the trophy
    repository before each award.
    """

    def __init__(
        self,
        trophy_repo: TrophyRepository,
        notifier: ChallengeCompletionNotifier,
        clock: Clock,
        *,
        rank_cutoff: int = DEFAULT_RANK_CUTOFF,
        default_image_url: Optional[str] = None,
        dedupe: bool = False,
    ):
        """
        Initialize the dispatcher.

        Args:
            trophy_repo: Repository trophies are written to
            notifier: Receives one completion event per trophy
            clock: Source of award timestamps
            rank_cutoff: Worst competitive rank that still earns a trophy
            default_image_url: Image used when a challenge has no badge
            dedupe: Skip recipients already holding this challenge's trophy
        """
        self._trophy_repo = trophy_repo
        self._notifier = notifier
        self._clock = clock
        self._rank_cutoff = rank_cutoff
        self._default_image_url = default_image_url
        self._dedupe = dedupe

    async def dispatch_award(self, challenge: Challenge, user_id: str) -> List[Trophy]:
        """
        Award trophies for a completed challenge.

        Args:
            challenge: Challenge snapshot after the triggering update
            user_id: User whose contribution completed the challenge

        Returns:
            Trophies written (empty when nobody qualifies)
        """
        now = self._clock.now()
        if not challenge.should_award_trophy(user_id, now):
            logger.debug(
                "Challenge %s does not award user %s yet", challenge.id, user_id
            )
            return []

        if challenge.scope is ChallengeScope.GROUP:
            recipients = list(dict.fromkeys(challenge.participants))
        else:
            if challenge.scope is ChallengeScope.COMPETITIVE and not self.is_eligible(
                challenge, user_id
            ):
                logger.debug(
                    "User %s ranked %s in challenge %s, no trophy",
                    user_id,
                    challenge.rank_for(user_id),
                    challenge.id,
                )
                return []
            recipients = [user_id]

        trophies: List[Trophy] = []
        for recipient in recipients:
            trophy = await self._award(challenge, recipient)
            if trophy is not None:
                trophies.append(trophy)
        return trophies

    def is_eligible(self, challenge: Challenge, user_id: str) -> bool:
        """Competitive gate: ranked within the cutoff, or met the goal."""
        rank = challenge.rank_for(user_id)
        if rank is not None and rank <= self._rank_cutoff:
            return True
        return challenge.is_completed_by_user(user_id)

    async def _award(self, challenge: Challenge, recipient: str) -> Optional[Trophy]:
        if self._dedupe and await self._trophy_repo.has_challenge_trophy(
            recipient, challenge.id
        ):
            logger.info(
                "User %s already holds trophy for challenge %s", recipient, challenge.id
            )
            return None

        trophy = self.build_trophy(challenge, recipient)
        await self._trophy_repo.award_trophy(trophy)
        logger.info(
            "Awarded trophy %s to user %s for challenge %s",
            trophy.id,
            recipient,
            challenge.id,
        )
        self._notifier.notify_challenge_completed(challenge, trophy)
        return trophy

    def build_trophy(self, challenge: Challenge, recipient: str) -> Trophy:
        metadata: Dict[str, str] = {
            "challengeId": challenge.id,
            "goal": challenge.goal_label,
            "scope": challenge.scope.value,
        }
        if challenge.scope is ChallengeScope.COMPETITIVE:
            rank = challenge.rank_for(recipient)
            if rank is not None:
                metadata["rank"] = str(rank)

        return Trophy(
            id=str(uuid.uuid4()),
            user_id=recipient,
            title=challenge.title,
            description=challenge.description,
            image_url=challenge.badge_image_url or self._default_image_url,
            date_earned=self._clock.now(),
            type=TrophyType.CHALLENGE,
            metadata=metadata,
        )
