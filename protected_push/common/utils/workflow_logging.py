"""Logging that speaks the CI runner's workflow-command dialect.

The runner turns ``::error::``/``::warning::``/``::debug::`` lines into
annotations and folds output between ``::group::`` and ``::endgroup::``.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}

_exit_code = 0


def escape_data(message: str) -> str:
    """Escape a workflow-command payload so multi-line messages stay together."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandFormatter(logging.Formatter):
    """Prefix records with the workflow command matching their level."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def configure_logging(level: int = logging.INFO, stream=None) -> None:
    """Install a single workflow-command handler on the root logger."""
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def _write(line: str, stream=None) -> None:
    out = stream or sys.stdout
    out.write(line + "\n")
    out.flush()


@contextmanager
def log_group(title: str, stream=None) -> Iterator[None]:
    """Fold everything logged inside the block under ``title``."""
    _write(f"::group::{title}", stream)
    try:
        yield
    finally:
        _write("::endgroup::", stream)


def set_failed(message: str, error: Optional[BaseException] = None) -> None:
    """Report the run as failed. The process exit code becomes 1."""
    global _exit_code
    if error is not None:
        logger.error(str(error))
    logger.error(message)
    _exit_code = 1


def get_exit_code() -> int:
    return _exit_code


def reset_exit_code() -> None:
    global _exit_code
    _exit_code = 0
