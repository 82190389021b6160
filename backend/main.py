"""
Service factory for the challenge progress engine.

This module wires the engine's collaborators from settings. The factory
pattern allows for:
- Easy testing with custom settings and an injected client
- Several independent engine instances in one process
- Clear separation of wiring from business logic

Usage:
    from backend.main import create_services
    from backend.settings import Settings

    # Default services (uses get_settings())
    services = await create_services()
    report = await services.progress.track_workout_progress(workout)

    # Test services with custom settings and a stubbed client
    test_settings = Settings(environment="test", _env_file=None)
    services = await create_services(settings=test_settings, client=fake_client)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import sentry_sdk
from supabase import AsyncClient, acreate_client

from application.ports import ChallengeCompletionNotifier
from application.use_cases import ChallengeMembershipUseCase, CreateChallengeUseCase
from backend.core.award_dispatcher import AwardDispatcher
from backend.core.challenge_progress_service import ChallengeProgressService
from backend.core.clock import SystemClock
from backend.core.progress_aggregator import ProgressAggregator
from backend.core.progress_calculator import ProgressCalculator
from backend.services.challenge_events import EventLoopCompletionNotifier
from backend.settings import Settings, get_settings
from infrastructure.db import (
    SupabaseChallengeRepository,
    SupabaseTrophyRepository,
    SupabaseWorkoutHistoryRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ChallengeServices:
    """Everything a caller needs to drive challenges."""

    progress: ChallengeProgressService
    membership: ChallengeMembershipUseCase
    create_challenge: CreateChallengeUseCase
    notifier: ChallengeCompletionNotifier


async def create_services(
    settings: Optional[Settings] = None,
    *,
    client: Optional[AsyncClient] = None,
    notifier: Optional[ChallengeCompletionNotifier] = None,
) -> ChallengeServices:
    """
    Create and wire a challenge engine instance.

    Must be awaited inside the event loop that should receive completion
    events (unless a notifier is supplied).

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        client: Optional Supabase client. Created from settings when omitted.
        notifier: Optional completion notifier. Defaults to one bound to the
                  running event loop.

    Returns:
        Wired ChallengeServices

    Raises:
        ValueError: If no client is given and Supabase is not configured
    """
    if settings is None:
        settings = get_settings()

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    if client is None:
        client = await _create_client(settings)
    if notifier is None:
        notifier = EventLoopCompletionNotifier()

    clock = SystemClock()
    challenge_repo = SupabaseChallengeRepository(
        client,
        table=settings.challenges_table,
        max_attempts=settings.transaction_max_attempts,
    )
    history_repo = SupabaseWorkoutHistoryRepository(
        client, table=settings.workout_summaries_table
    )
    trophy_repo = SupabaseTrophyRepository(client, table=settings.trophies_table)

    calculator = ProgressCalculator(
        history_repo, pr_max_reps=settings.personal_record_max_reps
    )
    aggregator = ProgressAggregator()
    dispatcher = AwardDispatcher(
        trophy_repo,
        notifier,
        clock,
        rank_cutoff=settings.competitive_rank_cutoff,
        default_image_url=settings.default_trophy_image_url,
        dedupe=settings.trophy_dedupe_enabled,
    )

    _log_feature_flags(settings)

    return ChallengeServices(
        progress=ChallengeProgressService(
            challenge_repo, calculator, aggregator, dispatcher, clock
        ),
        membership=ChallengeMembershipUseCase(
            challenge_repo, history_repo, calculator, aggregator
        ),
        create_challenge=CreateChallengeUseCase(challenge_repo),
        notifier=notifier,
    )


async def _create_client(settings: Settings) -> AsyncClient:
    """Create the Supabase async client from settings."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError("SUPABASE_URL and a Supabase key must be configured")
    return await acreate_client(settings.supabase_url, settings.supabase_key)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        )
        logger.info("Sentry initialized for challenge engine")


def _log_feature_flags(settings: Settings) -> None:
    """Log the status of feature flags at startup."""
    if settings.trophy_dedupe_enabled:
        logger.info("TROPHY_DEDUPE_ENABLED is active")
    else:
        logger.info("TROPHY_DEDUPE_ENABLED is disabled; repeated completions re-award")
