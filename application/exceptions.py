"""
Application-layer exceptions.

These exceptions are used across the application, core and infrastructure
layers. Policy non-matches (e.g. a competitive finisher ranked too low for a
trophy) are not errors and never raise.
"""

from typing import Optional


class ChallengeError(Exception):
    """Base class for challenge engine failures."""

    pass


class ChallengeNotFoundError(ChallengeError):
    """A transactional operation referenced a challenge that does not exist.

    The transaction is aborted and nothing is written.
    """

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge not found: {challenge_id}")
        self.challenge_id = challenge_id


class ChallengeValidationError(ChallengeError):
    """Input rejected before any side effect (missing identity, bad range...)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ChallengeWriteConflictError(ChallengeError):
    """The challenge document changed between the read and the write.

    Raised by optimistic-concurrency adapters; the transaction wrapper retries
    it and only propagates once attempts are exhausted.
    """

    def __init__(self, challenge_id: str, expected_version: int):
        super().__init__(
            f"Challenge {challenge_id} changed concurrently "
            f"(expected version {expected_version})"
        )
        self.challenge_id = challenge_id
        self.expected_version = expected_version
