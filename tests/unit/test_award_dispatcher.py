"""
Unit tests for the Award Dispatcher.

Tests cover:
- Group fan-out to every participant
- Competitive awards to the triggering user only, with the rank gate
- Trophy contents and completion events
- Optional re-award guard
"""
from datetime import datetime, timezone

import pytest

from backend.core.award_dispatcher import AwardDispatcher
from domain.models import ChallengeScope, TrophyType
from tests.fakes import (
    FakeTrophyRepository,
    FixedClock,
    RecordingCompletionNotifier,
    make_challenge,
)

AFTER_MARCH = datetime(2025, 4, 2, tzinfo=timezone.utc)


@pytest.fixture
def trophy_repo():
    return FakeTrophyRepository()


@pytest.fixture
def notifier():
    return RecordingCompletionNotifier()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def dispatcher(trophy_repo, notifier, clock):
    return AwardDispatcher(trophy_repo, notifier, clock, default_image_url="https://img/trophy.png")


# =============================================================================
# Group
# =============================================================================


@pytest.mark.unit
class TestGroupAwards:
    """Completing a group challenge rewards everyone."""

    @pytest.mark.asyncio
    async def test_every_participant_gets_one_trophy(self, dispatcher, trophy_repo, notifier):
        challenge = make_challenge(
            scope=ChallengeScope.GROUP,
            goal=100,
            participants=["u1", "u2", "u3"],
            progress={"u1": 70, "u2": 30},
        )

        trophies = await dispatcher.dispatch_award(challenge, "u2")

        assert sorted(t.user_id for t in trophies) == ["u1", "u2", "u3"]
        assert len(trophy_repo.trophies) == 3
        assert len(notifier.events) == 3

    @pytest.mark.asyncio
    async def test_duplicate_participant_entries_award_once(self, dispatcher):
        challenge = make_challenge(
            scope=ChallengeScope.GROUP,
            goal=10,
            participants=["u1", "u2", "u1"],
            progress={"u1": 10},
        )
        trophies = await dispatcher.dispatch_award(challenge, "u1")
        assert sorted(t.user_id for t in trophies) == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_incomplete_group_awards_nothing(self, dispatcher, trophy_repo):
        challenge = make_challenge(
            scope=ChallengeScope.GROUP, goal=100, participants=["u1", "u2"], progress={"u1": 99}
        )
        assert await dispatcher.dispatch_award(challenge, "u1") == []
        assert trophy_repo.trophies == []


# =============================================================================
# Competitive
# =============================================================================


@pytest.mark.unit
class TestCompetitiveAwards:
    """Only the triggering user, gated by rank or goal."""

    @pytest.mark.asyncio
    async def test_only_trigger_user_is_awarded(self, dispatcher):
        challenge = make_challenge(
            goal=100, participants=["u1", "u2"], progress={"u1": 120, "u2": 150}
        )
        trophies = await dispatcher.dispatch_award(challenge, "u1")
        assert [t.user_id for t in trophies] == ["u1"]

    @pytest.mark.asyncio
    async def test_goal_met_outside_cutoff_is_still_awarded(self, trophy_repo, notifier, clock):
        dispatcher = AwardDispatcher(trophy_repo, notifier, clock, rank_cutoff=1)
        challenge = make_challenge(
            goal=100, participants=["u1", "u2"], progress={"u1": 100, "u2": 150}
        )
        trophies = await dispatcher.dispatch_award(challenge, "u1")
        assert trophies[0].metadata["rank"] == "2"

    @pytest.mark.asyncio
    async def test_goal_not_met_before_end_awards_nothing(self, dispatcher):
        challenge = make_challenge(goal=100, progress={"u1": 99})
        assert await dispatcher.dispatch_award(challenge, "u1") == []

    @pytest.mark.asyncio
    async def test_after_end_ranked_within_cutoff(self, dispatcher, clock):
        clock.set(AFTER_MARCH)
        challenge = make_challenge(
            goal=1000,
            participants=["a", "b", "c", "d"],
            progress={"a": 400, "b": 300, "c": 200, "d": 100},
        )

        assert [t.user_id for t in await dispatcher.dispatch_award(challenge, "c")] == ["c"]
        assert await dispatcher.dispatch_award(challenge, "d") == []

    def test_is_eligible(self, dispatcher):
        challenge = make_challenge(
            goal=1000,
            participants=["a", "b", "c", "d"],
            progress={"a": 400, "b": 300, "c": 200, "d": 100},
        )
        assert dispatcher.is_eligible(challenge, "a") is True
        assert dispatcher.is_eligible(challenge, "d") is False
        assert dispatcher.is_eligible(challenge, "nobody") is False

    @pytest.mark.asyncio
    async def test_non_participant_is_never_awarded(self, dispatcher):
        challenge = make_challenge(goal=10, participants=["u1"], progress={"u1": 20, "ghost": 20})
        assert await dispatcher.dispatch_award(challenge, "ghost") == []


@pytest.mark.unit
class TestCumulativeAwards:
    """Deprecated scope awards the trigger user on their own total."""

    @pytest.mark.asyncio
    async def test_only_trigger_user(self, dispatcher):
        challenge = make_challenge(
            scope=ChallengeScope.CUMULATIVE,
            goal=100,
            participants=["u1", "u2"],
            progress={"u1": 100, "u2": 100},
        )
        trophies = await dispatcher.dispatch_award(challenge, "u2")
        assert [t.user_id for t in trophies] == ["u2"]
        assert "rank" not in trophies[0].metadata


# =============================================================================
# Trophy contents
# =============================================================================


@pytest.mark.unit
class TestTrophyContents:
    """Trophy fields and completion events."""

    @pytest.mark.asyncio
    async def test_trophy_fields(self, dispatcher, clock):
        challenge = make_challenge(goal=5000, progress={"u1": 5000})

        trophy = (await dispatcher.dispatch_award(challenge, "u1"))[0]

        assert trophy.title == "March Volume"
        assert trophy.description == "Lift as much as you can"
        assert trophy.type is TrophyType.CHALLENGE
        assert trophy.date_earned == clock.now()
        assert trophy.challenge_id == "c1"
        assert trophy.metadata["goal"] == "5000 lbs"
        assert trophy.metadata["scope"] == "competitive"
        assert trophy.metadata["rank"] == "1"

    @pytest.mark.asyncio
    async def test_image_falls_back_to_default(self, dispatcher):
        challenge = make_challenge(goal=10, progress={"u1": 10})
        trophy = (await dispatcher.dispatch_award(challenge, "u1"))[0]
        assert trophy.image_url == "https://img/trophy.png"

    @pytest.mark.asyncio
    async def test_badge_image_is_used(self, dispatcher):
        challenge = make_challenge(goal=10, progress={"u1": 10}, badge_image_url="https://img/badge.png")
        trophy = (await dispatcher.dispatch_award(challenge, "u1"))[0]
        assert trophy.image_url == "https://img/badge.png"

    @pytest.mark.asyncio
    async def test_event_carries_challenge_and_trophy(self, dispatcher, notifier):
        challenge = make_challenge(goal=10, progress={"u1": 10})
        trophy = (await dispatcher.dispatch_award(challenge, "u1"))[0]
        assert notifier.events == [(challenge, trophy)]


# =============================================================================
# Re-award
# =============================================================================


@pytest.mark.unit
class TestReAward:
    """Repeated completions with and without the dedupe guard."""

    @pytest.mark.asyncio
    async def test_default_re_awards(self, dispatcher, trophy_repo):
        challenge = make_challenge(goal=10, progress={"u1": 10})
        await dispatcher.dispatch_award(challenge, "u1")
        await dispatcher.dispatch_award(challenge, "u1")
        assert len(trophy_repo.trophies_for("u1")) == 2

    @pytest.mark.asyncio
    async def test_dedupe_skips_existing_holder(self, trophy_repo, notifier, clock):
        dispatcher = AwardDispatcher(trophy_repo, notifier, clock, dedupe=True)
        challenge = make_challenge(goal=10, progress={"u1": 10})

        await dispatcher.dispatch_award(challenge, "u1")
        second = await dispatcher.dispatch_award(challenge, "u1")

        assert second == []
        assert len(trophy_repo.trophies_for("u1")) == 1
        assert len(notifier.events) == 1
