"""
Branch protection, check run and branch lifecycle operations.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from protected_push.common.exception.exceptions import (
    AuthError,
    GitHubAPIError,
    NotFoundOrUnauthorized,
    RefNotReady,
)
from protected_push.services.github.api.client import GitHubAPIClient
from protected_push.services.github.models.types import BranchRef, CheckRun

logger = logging.getLogger(__name__)

CHECK_RUNS_PAGE_SIZE = 100


class BranchProtectionOperations:
    """Reads protection rules and check runs, and deletes remote branches."""

    def __init__(self, client: Optional[GitHubAPIClient] = None):
        """Initialize branch protection operations.

        Args:
            client: GitHub API client (built from each BranchRef's token if not provided)
        """
        self.client = client

    def _client_for(self, branch_ref: BranchRef) -> GitHubAPIClient:
        return self.client or GitHubAPIClient(token=branch_ref.token)

    @staticmethod
    def _repo_path(branch_ref: BranchRef) -> str:
        return f"repos/{branch_ref.owner}/{branch_ref.repo}"

    async def required_status_checks(self, branch_ref: BranchRef) -> List[str]:
        """Get the names of the status checks required by a branch's protection.

        Args:
            branch_ref: Branch to inspect

        Returns:
            Required check names, in the order the platform reports them

        Raises:
            NotFoundOrUnauthorized: If the branch is missing, unprotected, or unreadable
        """
        client = self._client_for(branch_ref)
        path = (
            f"{self._repo_path(branch_ref)}/branches/"
            f"{quote(branch_ref.branch, safe='/')}/protection/required_status_checks"
        )
        try:
            response = await client.get(path)
        except GitHubAPIError as e:
            if e.status_code in (401, 403, 404):
                logger.error(
                    "Error getting branch protections. Potentially the branch doesn't exist "
                    "or the token doesn't have access to it."
                )
                raise NotFoundOrUnauthorized(str(e), status_code=e.status_code, url=e.url)
            raise

        contexts = list(response.get("contexts") or [])
        for check in response.get("checks") or []:
            context = check.get("context")
            if context and context not in contexts:
                contexts.append(context)
        return contexts

    async def check_runs_for_ref(self, branch_ref: BranchRef) -> List[CheckRun]:
        """List the check runs currently reported for a branch's head commit.

        Args:
            branch_ref: Branch whose head commit is inspected

        Returns:
            Every check run on the ref (required or not)

        Raises:
            AuthError: If the token is rejected
            RefNotReady: If the platform cannot resolve the ref yet
        """
        client = self._client_for(branch_ref)
        path = f"{self._repo_path(branch_ref)}/commits/{quote(branch_ref.branch, safe='/')}/check-runs"

        check_runs: List[CheckRun] = []
        page = 1
        while True:
            params = {"per_page": CHECK_RUNS_PAGE_SIZE, "page": page, "filter": "latest"}
            try:
                response = await client.get(path, params=params)
            except AuthError:
                logger.error("Token was rejected while listing check runs.")
                raise
            except GitHubAPIError as e:
                if e.status_code == 422:
                    raise RefNotReady(str(e), status_code=422, url=e.url)
                raise

            items = response.get("check_runs") or []
            check_runs.extend(CheckRun.from_api(item) for item in items)
            total_count = response.get("total_count", len(check_runs))
            if not items or len(check_runs) >= total_count:
                return check_runs
            page += 1

    async def branch_exists(self, branch_ref: BranchRef) -> bool:
        """Check whether a branch exists on the remote.

        Args:
            branch_ref: Branch to look up

        Returns:
            True if the platform knows the branch
        """
        client = self._client_for(branch_ref)
        try:
            await client.get(f"{self._repo_path(branch_ref)}/branches/{quote(branch_ref.branch, safe='/')}")
        except GitHubAPIError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def delete_branch(self, branch_ref: BranchRef) -> bool:
        """Delete a remote branch.

        Deleting a branch that is already gone is tolerated.

        Args:
            branch_ref: Branch to delete

        Returns:
            True if the branch was deleted, False if it did not exist
        """
        client = self._client_for(branch_ref)
        try:
            await client.delete(
                f"{self._repo_path(branch_ref)}/git/refs/heads/{quote(branch_ref.branch, safe='/')}"
            )
        except GitHubAPIError as e:
            if e.status_code in (404, 422):
                logger.warning(f"Branch {branch_ref.branch} was already deleted: {e}")
                return False
            logger.error(f"Failed to delete branch {branch_ref.branch}: {e}")
            raise

        logger.info(f"Deleted remote branch {branch_ref.branch}")
        return True
