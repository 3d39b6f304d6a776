"""
Entry point of the protected push action.

Environment variables:
    INPUT_*: Action inputs (see common/config/config.py)
    GITHUB_REPOSITORY, GITHUB_RUN_ID, GITHUB_ACTOR, GITHUB_WORKSPACE: Runner context
    PUSH_ACTION_LOG_LEVEL: Log level (default: DEBUG when RUNNER_DEBUG=1, else INFO)
"""

import asyncio
import logging
import os
import sys

from protected_push.common.config.config import get_inputs
from protected_push.common.exception.exceptions import ConfigurationError
from protected_push.common.utils.workflow_logging import (
    configure_logging,
    get_exit_code,
    log_group,
    set_failed,
)
from protected_push.services.github.models.types import RunResult
from protected_push.services.push_service import ProtectedPushService

logger = logging.getLogger(__name__)


def _log_level() -> int:
    default = "DEBUG" if os.getenv("RUNNER_DEBUG") == "1" else "INFO"
    return getattr(logging, os.getenv("PUSH_ACTION_LOG_LEVEL", default).upper(), logging.INFO)


async def run() -> int:
    """Run the action once and return the process exit code."""
    with log_group("Internal logs"):
        try:
            inputs = get_inputs()
        except ConfigurationError as e:
            set_failed(f"> Invalid action configuration: {e}")
            return get_exit_code()

        result: RunResult = await ProtectedPushService(inputs).run()
        logger.debug(f"Run outcome: {result.outcome.value}")

    return max(result.outcome.exit_code, get_exit_code())


def main() -> None:
    configure_logging(_log_level())
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
