"""
Protected push orchestration.

Lands local commits on a branch that requires status checks:

1. validate the repository and (optionally) commit pending changes
2. fetch, confirm the target branch exists and that HEAD is ahead of it
3. read the target's required checks
4. push HEAD to a temporary branch and wait for the required checks on it
5. fast-forward the target to the checked commit
6. delete the temporary branch, whatever happened in 4 and 5
"""

import logging
import time
from typing import Callable, List, Optional

from protected_push.common.config.config import TEMP_BRANCH_PREFIX, ActionInputs
from protected_push.common.exception.exceptions import PollTimeoutError
from protected_push.common.utils.result import to
from protected_push.common.utils.workflow_logging import set_failed
from protected_push.services.github.api.branch_protection import BranchProtectionOperations
from protected_push.services.github.api.check_suites import CheckSuitePoller
from protected_push.services.github.git.commit_operations import commit
from protected_push.services.github.git.repository import LocalRepository
from protected_push.services.github.models.types import (
    BranchRef,
    CheckRun,
    RunOutcome,
    RunResult,
    WorkingTreeStatus,
    failed_required_checks,
    find_check_run,
)

logger = logging.getLogger(__name__)


def build_temporary_branch_name(run_id: str, now_ms: int) -> str:
    return f"{TEMP_BRANCH_PREFIX}/{run_id}/{now_ms}"


def log_working_tree_status(status: WorkingTreeStatus) -> None:
    logger.info(f"> {len(status.modified)} tracked file(s) have been modified.")
    for path in status.modified:
        logger.info(f"  modified: {path}")
    logger.info(f"> {len(status.staged)} tracked file(s) have been staged.")
    for path in status.staged:
        logger.info(f"  staged: {path}")
    logger.info(f"> {len(status.untracked)} untracked files.")
    for path in status.untracked:
        logger.info(f"  untracked: {path}")


class ProtectedPushService:
    """Runs one protected push from precondition checks to cleanup."""

    def __init__(
        self,
        inputs: ActionInputs,
        repository: Optional[LocalRepository] = None,
        protection: Optional[BranchProtectionOperations] = None,
        poller: Optional[CheckSuitePoller] = None,
        now_ms: Optional[Callable[[], int]] = None,
    ):
        """Initialize the service.

        Args:
            inputs: Validated action inputs
            repository: Local repository (defaults to inputs.repository_path)
            protection: Branch protection client (defaults to one using the input token)
            poller: Check suite poller (defaults to the input interval and timeout)
            now_ms: Epoch milliseconds source for the temporary branch name
        """
        self.inputs = inputs
        self.repository = repository or LocalRepository(inputs.repository_path)
        self.protection = protection or BranchProtectionOperations()
        self.poller = poller or CheckSuitePoller(
            self.protection,
            interval_seconds=inputs.interval_seconds,
            timeout_seconds=inputs.timeout_seconds,
        )
        self._now_ms = now_ms or (lambda: int(time.time() * 1000))
        self.target = BranchRef(
            owner=inputs.owner,
            repo=inputs.repo,
            branch=inputs.branch_to_push_to,
            token=inputs.token,
        )

    def _finish(
        self,
        outcome: RunOutcome,
        message: str,
        error: Optional[BaseException] = None,
        temporary_branch: Optional[str] = None,
        commit_hash: Optional[str] = None,
    ) -> RunResult:
        """Report the terminal outcome of the run. Every path ends here exactly once."""
        if outcome == RunOutcome.SUCCEEDED:
            logger.info(message)
        elif outcome.is_success:
            logger.warning(message)
        else:
            set_failed(message, error)
        return RunResult(
            outcome=outcome,
            message=message,
            temporary_branch=temporary_branch,
            commit_hash=commit_hash,
            error=str(error) if error else None,
        )

    async def run(self) -> RunResult:
        """Execute the protected push.

        Returns:
            RunResult describing the terminal outcome
        """
        try:
            return await self._run()
        except Exception as e:
            logger.exception("Unexpected error during protected push")
            return self._finish(RunOutcome.UNEXPECTED_ERROR, f"> {e}", e)

    async def _run(self) -> RunResult:
        target_branch = self.inputs.branch_to_push_to

        is_repository, error = await to(self.repository.is_repository())
        if error or not is_repository:
            return self._finish(
                RunOutcome.NOT_A_REPOSITORY,
                "> The working directory is not a git repository. Aborting.",
                error,
            )

        logger.info("> Checking for uncommitted changes in the git working tree...")
        status, error = await to(self.repository.working_tree_status())
        if error:
            return self._finish(
                RunOutcome.NOT_A_REPOSITORY, "> Could not read the git working tree. Aborting.", error
            )
        log_working_tree_status(status)

        commit_hash = None
        if self._should_commit(status):
            commit_hash, error = await to(
                commit(
                    self.repository,
                    self.inputs.commit_message,
                    self.inputs.commit_args,
                    self.inputs.git_config,
                )
            )
            if error:
                return self._finish(
                    RunOutcome.COMMIT_FAILED, "> Failed to commit the local changes. Aborting.", error
                )
        elif not status.is_clean:
            logger.warning(
                "> There are uncommitted changes in the git working tree and shouldCommit is "
                "disabled. Only already committed history will be pushed."
            )

        logger.info("> Fetching repo...")
        _, error = await to(self.repository.fetch())
        if error:
            return self._finish(RunOutcome.FETCH_FAILED, "> Failed to fetch the remote. Aborting.", error)

        logger.info("> Verifying if target branch exists...")
        exists, error = await to(self._target_branch_exists())
        if error or not exists:
            return self._finish(
                RunOutcome.TARGET_BRANCH_MISSING,
                f"> Branch {target_branch} does not exist. Aborting.",
                error,
            )
        logger.info(f"> Branch {target_branch} exists. Continuing...")

        logger.info("> Verifying we are ahead of the remote branch...")
        ahead_count, error = await to(self.repository.ahead_count(target_branch))
        if error:
            return self._finish(
                RunOutcome.NOT_AHEAD,
                f"> Could not count the commits ahead of origin/{target_branch}. Aborting.",
                error,
            )
        if not ahead_count:
            return self._finish(
                RunOutcome.NOT_AHEAD,
                f"> Local branch is not ahead of origin/{target_branch}; nothing to push. Aborting.",
            )
        logger.info(f"> Local branch is {ahead_count} commit(s) ahead of origin/{target_branch}.")

        logger.info("> Checking if the remote branch requires status checks...")
        required_checks, error = await to(self.protection.required_status_checks(self.target))
        if error:
            return self._finish(
                RunOutcome.PROTECTION_LOOKUP_FAILED,
                f"> Could not get required status checks for branch {target_branch}. Aborting.",
                error,
            )

        if not required_checks:
            return self._finish(
                RunOutcome.NO_CHECKS_REQUIRED,
                f"> The remote branch {target_branch} does not require status checks. Nothing was pushed.",
                commit_hash=commit_hash,
            )
        logger.info(f"> The remote branch requires status checks: {', '.join(required_checks)}.")

        temporary_branch = build_temporary_branch_name(self.inputs.run_id, self._now_ms())
        logger.info("> Creating a temporary branch and throwing away all uncommitted changes...")
        _, error = await to(self.repository.create_branch(temporary_branch))
        if error:
            return self._finish(
                RunOutcome.TEMP_BRANCH_CREATE_FAILED,
                f"> Could not create temporary branch {temporary_branch}. Aborting.",
                error,
            )

        logger.info(f"> Pushing the temporary branch {temporary_branch} to remote...")
        _, error = await to(self.repository.push(temporary_branch, force=True))
        if error:
            return self._finish(
                RunOutcome.TEMP_BRANCH_PUSH_FAILED,
                f"> Could not push temporary branch {temporary_branch}. Aborting.",
                error,
                temporary_branch=temporary_branch,
            )

        temporary = self.target.with_branch(temporary_branch)
        try:
            result = await self._land(temporary, required_checks, commit_hash)
        finally:
            await self._delete_temporary_branch(temporary)
        return result

    def _should_commit(self, status: WorkingTreeStatus) -> bool:
        if not self.inputs.should_commit:
            return False
        return not status.is_clean or "--allow-empty" in self.inputs.commit_args

    async def _target_branch_exists(self) -> bool:
        """Look for the target locally, then ask the platform and fetch it if it only exists there."""
        target_branch = self.inputs.branch_to_push_to
        if await self.repository.branch_exists(target_branch):
            return True
        if not await self.protection.branch_exists(self.target):
            return False
        logger.info(f"> Branch {target_branch} is missing locally, fetching it...")
        await self.repository.fetch_branch(target_branch)
        return True

    async def _land(
        self, temporary: BranchRef, required_checks: List[str], commit_hash: Optional[str]
    ) -> RunResult:
        """Wait for the checks on the temporary branch and fast-forward the target."""
        target_branch = self.inputs.branch_to_push_to

        logger.info("> Waiting for the status checks to complete...")
        check_runs, error = await to(self.poller.wait_for_check_suites(temporary, required_checks))
        if isinstance(error, PollTimeoutError):
            return self._finish(
                RunOutcome.POLL_TIMEOUT,
                f"> The status checks did not complete on {temporary.branch} in time. Aborting.",
                error,
                temporary_branch=temporary.branch,
            )
        if error:
            return self._finish(
                RunOutcome.POLL_ERROR,
                f"> Error getting status of checks on {temporary.branch}. Aborting.",
                error,
                temporary_branch=temporary.branch,
            )

        failed = failed_required_checks(check_runs, required_checks)
        if failed:
            self._log_failed_checks(check_runs, failed)
            return self._finish(
                RunOutcome.REQUIRED_CHECK_FAILED,
                f"> The status checks did not pass on the temporary branch: {', '.join(failed)}. Aborting.",
                temporary_branch=temporary.branch,
            )
        logger.info("> The status checks passed!")

        logger.info(f"> Pushing {temporary.branch} --> origin/{target_branch} ...")
        _, error = await to(self._fast_forward(temporary.branch))
        if error:
            return self._finish(
                RunOutcome.FAST_FORWARD_FAILED,
                f"> Could not fast-forward {target_branch} to {temporary.branch}. Aborting.",
                error,
                temporary_branch=temporary.branch,
            )

        return self._finish(
            RunOutcome.SUCCEEDED,
            "> Task completed.",
            temporary_branch=temporary.branch,
            commit_hash=commit_hash,
        )

    async def _fast_forward(self, temporary_branch: str) -> None:
        target_branch = self.inputs.branch_to_push_to
        await self.repository.checkout(target_branch)
        await self.repository.reset_hard(temporary_branch)
        await self.repository.push(target_branch)

    @staticmethod
    def _log_failed_checks(check_runs: List[CheckRun], failed: List[str]) -> None:
        for name in failed:
            check_run = find_check_run(check_runs, name)
            conclusion = check_run.conclusion if check_run else "missing"
            url = f" ({check_run.html_url})" if check_run and check_run.html_url else ""
            logger.error(f"  {name}: {conclusion}{url}")

    async def _delete_temporary_branch(self, temporary: BranchRef) -> None:
        logger.info(f"> Deleting {temporary.branch} ...")
        _, error = await to(self.protection.delete_branch(temporary))
        if error:
            logger.warning(f"> Could not delete temporary branch {temporary.branch}: {error}")
