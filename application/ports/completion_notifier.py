"""
Challenge completion notifier and clock interfaces (Ports).

The notifier is fire-and-forget: the engine does not wait for observers and
observer failures never reach the engine.
"""
from datetime import datetime
from typing import Protocol

from domain.models import Challenge, Trophy


class ChallengeCompletionNotifier(Protocol):
    """Emits "challenge completed" events to UI/observer layers."""

    def notify_challenge_completed(self, challenge: Challenge, trophy: Trophy) -> None:
        """
        Emit a completion event.

        Implementations must deliver every event on one well-defined
        execution context, whatever thread this is called from.
        """
        ...


class Clock(Protocol):
    """Source of the current time (timezone-aware, UTC)."""

    def now(self) -> datetime:
        ...
