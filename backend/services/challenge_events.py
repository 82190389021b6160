"""
Challenge completion events.

Observers (UI toasts, push fan-out) subscribe to "challenge completed"
events. Every event is delivered on the single event loop the notifier was
bound to, whatever thread emitted it, so observers that are not thread-safe
never run concurrently with each other.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from domain.models import Challenge, Trophy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChallengeCompletedEvent:
    """A trophy was issued for a completed challenge."""

    challenge: Challenge
    trophy: Trophy
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[ChallengeCompletedEvent], None]


class EventLoopCompletionNotifier:
    """
    ChallengeCompletionNotifier bound to one asyncio event loop.

    Usage:
        >>> notifier = EventLoopCompletionNotifier()  # inside a running loop
        >>> notifier.subscribe(lambda event: print(event.trophy.title))
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Bind the notifier.

        Args:
            loop: Delivery loop. Defaults to the running loop, so construct the
                  notifier from inside it when no loop is passed.

        Raises:
            RuntimeError: If no loop is given and none is running
        """
        self._loop = loop or asyncio.get_running_loop()
        self._subscribers: List[Subscriber] = []

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            A callable that removes the observer again
        """
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def notify_challenge_completed(self, challenge: Challenge, trophy: Trophy) -> None:
        """Schedule delivery on the bound loop; returns immediately."""
        event = ChallengeCompletedEvent(challenge=challenge, trophy=trophy)
        if self._loop.is_closed():
            logger.warning(
                "Dropping completion event for challenge %s: loop closed", challenge.id
            )
            return
        self._loop.call_soon_threadsafe(self._deliver, event)

    def _deliver(self, event: ChallengeCompletedEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception(
                    "Completion subscriber failed for challenge %s", event.challenge.id
                )
