"""
Polling of check runs until the required checks on a ref have finished.

The poller only answers "are we done waiting". Whether the finished checks
passed is for the caller to decide.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from protected_push.common.exception.exceptions import PollTimeoutError, RefNotReady
from protected_push.services.github.api.branch_protection import BranchProtectionOperations
from protected_push.services.github.models.types import (
    BranchRef,
    CheckRun,
    PollState,
    pending_required_checks,
)

logger = logging.getLogger(__name__)


class CheckSuitePoller:
    """Samples check runs on an interval until completion or timeout.

    Sampling happens at ``t0`` (when ``sample_immediately`` is set) and then at
    ``t0 + k * interval``. A tick that falls at or after the deadline is never
    started, and a sample answered at or after the deadline does not count.
    The first attempt is always made, so a timeout shorter than the interval
    still samples once. A timeout of 0 waits indefinitely.
    """

    def __init__(
        self,
        operations: BranchProtectionOperations,
        interval_seconds: float,
        timeout_seconds: float,
        sample_immediately: bool = True,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if interval_seconds < 0 or timeout_seconds < 0:
            raise ValueError("interval_seconds and timeout_seconds must be non-negative")
        self.operations = operations
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self.sample_immediately = sample_immediately
        self._clock = clock
        self._sleep = sleep

    async def wait_for_check_suites(
        self, branch_ref: BranchRef, required_checks: List[str]
    ) -> List[CheckRun]:
        """Wait until every required check on ``branch_ref`` has completed.

        Args:
            branch_ref: Ref the checks run against
            required_checks: Names that must reach the completed status

        Returns:
            The full check run list of the completing sample

        Raises:
            PollTimeoutError: If the timeout fires first
            AuthError: If the token is rejected while sampling
        """
        state = PollState(started_at=self._clock())
        deadline: Optional[float] = (
            state.started_at + self.timeout_seconds if self.timeout_seconds else None
        )

        next_tick = state.started_at
        if not self.sample_immediately:
            next_tick += self.interval_seconds

        while not state.timed_out:
            if state.attempts > 0 and deadline is not None and next_tick >= deadline:
                state.timed_out = True
                continue

            delay = next_tick - self._clock()
            if delay > 0:
                await self._sleep(delay)
            elif state.attempts > 0:
                await self._sleep(0)

            completed = await self._sample(branch_ref, required_checks, state)
            state.elapsed = self._clock() - state.started_at

            if deadline is not None and self._clock() >= deadline:
                state.timed_out = True
                continue
            if completed:
                logger.info(
                    f"All required checks completed on {branch_ref.branch} "
                    f"after {state.attempts} sample(s)"
                )
                return state.check_runs

            next_tick += self.interval_seconds

        pending = pending_required_checks(state.check_runs, required_checks)
        self._log_timeout_diagnostics(state, required_checks, pending)
        raise PollTimeoutError(self.timeout_seconds, pending)

    async def _sample(
        self, branch_ref: BranchRef, required_checks: List[str], state: PollState
    ) -> bool:
        """Fetch check runs once and report whether every required check completed."""
        state.attempts += 1
        try:
            check_runs = await self.operations.check_runs_for_ref(branch_ref)
        except RefNotReady as e:
            logger.debug(f"Ref {branch_ref.branch} is not ready yet: {e}")
            return False

        state.check_runs = check_runs
        pending = pending_required_checks(check_runs, required_checks)
        if pending:
            logger.debug(
                f"Sample {state.attempts}: waiting on {', '.join(pending)}"
            )
            return False
        return True

    def _log_timeout_diagnostics(
        self, state: PollState, required_checks: List[str], pending: List[str]
    ) -> None:
        logger.error(f"Timeout of {self.timeout_seconds:g} seconds reached.")
        observed = {check_run.name: check_run for check_run in state.check_runs}
        for name in required_checks:
            check_run = observed.get(name)
            if check_run is None:
                logger.error(f"  {name}: never reported")
            elif name in pending:
                logger.error(f"  {name}: still {check_run.status}")
            else:
                logger.info(f"  {name}: {check_run.status} ({check_run.conclusion})")
        logger.info(f"Sampled {state.attempts} time(s) over {state.elapsed:.0f}s")
