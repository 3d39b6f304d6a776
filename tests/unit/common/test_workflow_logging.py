"""Tests for workflow-command logging and git argument parsing."""

import io
import logging

import pytest

from protected_push.common.utils import workflow_logging
from protected_push.common.utils.git_args import parse_git_args
from protected_push.common.utils.workflow_logging import (
    WorkflowCommandFormatter,
    escape_data,
    log_group,
    set_failed,
)


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


class TestWorkflowCommandFormatter:
    """Test WorkflowCommandFormatter."""

    def test_levels_map_to_commands(self):
        """Test each level is prefixed with its workflow command."""
        formatter = WorkflowCommandFormatter("%(message)s")
        assert formatter.format(_record(logging.DEBUG, "d")) == "::debug::d"
        assert formatter.format(_record(logging.INFO, "i")) == "i"
        assert formatter.format(_record(logging.WARNING, "w")) == "::warning::w"
        assert formatter.format(_record(logging.ERROR, "e")) == "::error::e"

    def test_multiline_messages_are_escaped(self):
        """Test newlines and percent signs are escaped on command lines."""
        formatter = WorkflowCommandFormatter("%(message)s")
        assert formatter.format(_record(logging.ERROR, "50%\nfailed")) == "::error::50%25%0Afailed"

    def test_escape_data(self):
        """Test escape_data handles carriage returns."""
        assert escape_data("a\r\nb") == "a%0D%0Ab"


class TestLogGroup:
    """Test log_group."""

    def test_group_closed_on_error(self):
        """Test the group is closed even when the block raises."""
        stream = io.StringIO()
        with pytest.raises(RuntimeError):
            with log_group("Internal logs", stream=stream):
                raise RuntimeError("boom")
        assert stream.getvalue() == "::group::Internal logs\n::endgroup::\n"


class TestSetFailed:
    """Test set_failed."""

    def test_set_failed_sets_exit_code(self, caplog):
        """Test set_failed logs both messages and flips the exit code."""
        workflow_logging.reset_exit_code()
        with caplog.at_level(logging.ERROR):
            set_failed("> Aborting.", ValueError("root cause"))

        assert workflow_logging.get_exit_code() == 1
        assert "root cause" in caplog.text
        assert "> Aborting." in caplog.text
        workflow_logging.reset_exit_code()


class TestParseGitArgs:
    """Test parse_git_args."""

    def test_quoted_arguments(self):
        """Test quoted values stay together."""
        parsed = parse_git_args("-s --longOption 'This uses the \"other\" quotes' --file=message.txt")
        assert parsed == ["-s", "--longOption", 'This uses the "other" quotes', "--file=message.txt"]

    def test_blank_input(self):
        """Test whitespace-only input yields no arguments."""
        assert parse_git_args("      ") == []
        assert parse_git_args("") == []
