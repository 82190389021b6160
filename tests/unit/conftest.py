"""Pytest fixtures wiring the challenge engine to in-memory fakes."""

from dataclasses import dataclass

import pytest

from application.use_cases import ChallengeMembershipUseCase, CreateChallengeUseCase
from backend.core.award_dispatcher import AwardDispatcher
from backend.core.challenge_progress_service import ChallengeProgressService
from backend.core.progress_aggregator import ProgressAggregator
from backend.core.progress_calculator import ProgressCalculator
from tests.fakes import (
    FakeChallengeRepository,
    FakeTrophyRepository,
    FakeWorkoutHistoryRepository,
    FixedClock,
    RecordingCompletionNotifier,
)


@dataclass
class Engine:
    """Fakes plus the services built on them."""

    challenges: FakeChallengeRepository
    history: FakeWorkoutHistoryRepository
    trophies: FakeTrophyRepository
    notifier: RecordingCompletionNotifier
    clock: FixedClock
    calculator: ProgressCalculator
    aggregator: ProgressAggregator
    dispatcher: AwardDispatcher
    service: ChallengeProgressService
    membership: ChallengeMembershipUseCase
    create: CreateChallengeUseCase


def build_engine(*, dedupe: bool = False, rank_cutoff: int = 3) -> Engine:
    challenges = FakeChallengeRepository()
    history = FakeWorkoutHistoryRepository()
    trophies = FakeTrophyRepository()
    notifier = RecordingCompletionNotifier()
    clock = FixedClock()
    calculator = ProgressCalculator(history)
    aggregator = ProgressAggregator()
    dispatcher = AwardDispatcher(
        trophies, notifier, clock, rank_cutoff=rank_cutoff, dedupe=dedupe
    )
    return Engine(
        challenges=challenges,
        history=history,
        trophies=trophies,
        notifier=notifier,
        clock=clock,
        calculator=calculator,
        aggregator=aggregator,
        dispatcher=dispatcher,
        service=ChallengeProgressService(
            challenges, calculator, aggregator, dispatcher, clock
        ),
        membership=ChallengeMembershipUseCase(challenges, history, calculator, aggregator),
        create=CreateChallengeUseCase(challenges),
    )


@pytest.fixture
def engine() -> Engine:
    """Engine with default settings: no trophy dedupe, rank cutoff 3."""
    return build_engine()


@pytest.fixture
def dedupe_engine() -> Engine:
    """Engine with trophy dedupe enabled."""
    return build_engine(dedupe=True)
