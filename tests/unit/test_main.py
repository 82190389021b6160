"""
Unit tests for backend/main.py
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.main import ChallengeServices, _init_sentry, _log_feature_flags, create_services
from backend.services.challenge_events import EventLoopCompletionNotifier
from backend.settings import Settings
from tests.fakes import RecordingCompletionNotifier


@pytest.mark.unit
class TestCreateServices:
    """Test the create_services() factory function."""

    @pytest.mark.asyncio
    async def test_wires_services_with_injected_client(self):
        settings = Settings(environment="test", _env_file=None)
        services = await create_services(settings=settings, client=MagicMock())

        assert isinstance(services, ChallengeServices)
        assert isinstance(services.notifier, EventLoopCompletionNotifier)

    @pytest.mark.asyncio
    async def test_settings_reach_collaborators(self):
        settings = Settings(
            environment="test",
            transaction_max_attempts=2,
            competitive_rank_cutoff=1,
            trophy_dedupe_enabled=True,
            challenges_table="challenges_v2",
            _env_file=None,
        )
        notifier = RecordingCompletionNotifier()

        services = await create_services(settings=settings, client=MagicMock(), notifier=notifier)

        assert services.notifier is notifier
        repo = services.progress._challenge_repo
        assert repo._max_attempts == 2
        assert repo._table == "challenges_v2"
        dispatcher = services.progress._dispatcher
        assert dispatcher._rank_cutoff == 1
        assert dispatcher._dedupe is True

    @pytest.mark.asyncio
    async def test_uses_default_settings_when_none_provided(self):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            await create_services(client=MagicMock())

            mock_get_settings.assert_called_once()

    @pytest.mark.asyncio
    async def test_creates_client_from_settings(self):
        settings = Settings(
            environment="test",
            supabase_url="https://test.supabase.co",
            supabase_service_role_key=None,
            supabase_anon_key="anon",
            _env_file=None,
        )
        with patch("backend.main.acreate_client", new=AsyncMock(return_value=MagicMock())) as mock_create:
            await create_services(settings=settings)

        mock_create.assert_awaited_once_with("https://test.supabase.co", "anon")

    @pytest.mark.asyncio
    async def test_missing_supabase_config_raises(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        settings = Settings(environment="test", supabase_url=None, _env_file=None)
        with pytest.raises(ValueError):
            await create_services(settings=settings)


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        """Sentry should not be initialized when DSN is not set."""
        settings = Settings(environment="test", sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        """Sentry should be initialized when DSN is provided."""
        settings = Settings(
            environment="production",
            sentry_dsn="https://test@sentry.io/123",
            _env_file=None,
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once()
            call_kwargs = mock_init.call_args[1]
            assert call_kwargs["dsn"] == "https://test@sentry.io/123"
            assert call_kwargs["environment"] == "production"


@pytest.mark.unit
class TestLogFeatureFlags:
    """Test feature flag logging."""

    def test_logs_dedupe_active(self, caplog):
        settings = Settings(environment="test", trophy_dedupe_enabled=True, _env_file=None)
        with caplog.at_level(logging.INFO, logger="backend.main"):
            _log_feature_flags(settings)
        assert "TROPHY_DEDUPE_ENABLED is active" in caplog.text

    def test_logs_dedupe_disabled(self, caplog):
        settings = Settings(environment="test", _env_file=None)
        with caplog.at_level(logging.INFO, logger="backend.main"):
            _log_feature_flags(settings)
        assert "TROPHY_DEDUPE_ENABLED is disabled" in caplog.text
