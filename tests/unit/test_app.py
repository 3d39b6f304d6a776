"""Tests for the action entry point."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from protected_push import app
from protected_push.common.utils import workflow_logging
from protected_push.services.github.models.types import RunOutcome, RunResult


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    for name in ("INPUT_TOKEN", "GITHUB_REPOSITORY", "PUSH_ACTION_LOG_LEVEL", "RUNNER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    workflow_logging.reset_exit_code()
    yield
    workflow_logging.reset_exit_code()


class TestRun:
    """Test the action run wrapper."""

    @pytest.mark.asyncio
    async def test_invalid_configuration_fails(self, caplog):
        """Test missing inputs fail the run before any git work."""
        with patch("protected_push.app.ProtectedPushService") as service_cls:
            with caplog.at_level(logging.ERROR):
                exit_code = await app.run()

        assert exit_code == 1
        service_cls.assert_not_called()
        assert "Invalid action configuration" in caplog.text

    @pytest.mark.asyncio
    async def test_exit_code_follows_outcome(self, monkeypatch):
        """Test the exit code of a successful run."""
        monkeypatch.setenv("INPUT_TOKEN", "ghs_secret")
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/widgets")
        service = MagicMock()
        service.run = AsyncMock(return_value=RunResult(outcome=RunOutcome.SUCCEEDED, message="> Task completed."))

        with patch("protected_push.app.ProtectedPushService", return_value=service):
            exit_code = await app.run()

        assert exit_code == 0

    @pytest.mark.asyncio
    async def test_failed_outcome_exits_non_zero(self, monkeypatch):
        """Test a failed outcome exits with 1."""
        monkeypatch.setenv("INPUT_TOKEN", "ghs_secret")
        monkeypatch.setenv("GITHUB_REPOSITORY", "octo/widgets")
        service = MagicMock()
        service.run = AsyncMock(return_value=RunResult(outcome=RunOutcome.NOT_AHEAD, message="> nothing"))

        with patch("protected_push.app.ProtectedPushService", return_value=service):
            exit_code = await app.run()

        assert exit_code == 1


class TestLogLevel:
    """Test log level selection."""

    def test_default_is_info(self):
        """Test INFO without any override."""
        assert app._log_level() == logging.INFO

    def test_runner_debug(self, monkeypatch):
        """Test RUNNER_DEBUG switches to DEBUG."""
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        assert app._log_level() == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch):
        """Test PUSH_ACTION_LOG_LEVEL overrides RUNNER_DEBUG."""
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        monkeypatch.setenv("PUSH_ACTION_LOG_LEVEL", "warning")
        assert app._log_level() == logging.WARNING
