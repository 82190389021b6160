"""Backend services for the challenge engine."""

from backend.services.challenge_events import (
    ChallengeCompletedEvent,
    EventLoopCompletionNotifier,
)

__all__ = [
    "ChallengeCompletedEvent",
    "EventLoopCompletionNotifier",
]
