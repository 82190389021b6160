"""
Application Use Cases for the challenge engine.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models, not transport responses

Usage:
    from application.use_cases import (
        CreateChallengeUseCase,
        CreateChallengeRequest,
        ChallengeMembershipUseCase,
    )

    # Create a challenge
    create = CreateChallengeUseCase(challenge_repo=challenge_repo)
    challenge = await create.execute(request)

    # Join it, seeding progress from past workouts
    membership = ChallengeMembershipUseCase(
        challenge_repo=challenge_repo,
        history_repo=history_repo,
        calculator=calculator,
        aggregator=aggregator,
    )
    result = await membership.join(challenge.id, "user-123")
"""

from application.use_cases.create_challenge import (
    CreateChallengeRequest,
    CreateChallengeUseCase,
)
from application.use_cases.challenge_membership import (
    ChallengeMembershipUseCase,
    MembershipResult,
)

__all__ = [
    # CreateChallenge
    "CreateChallengeUseCase",
    "CreateChallengeRequest",
    # Membership
    "ChallengeMembershipUseCase",
    "MembershipResult",
]
