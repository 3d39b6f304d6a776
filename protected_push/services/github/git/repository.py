"""
Local repository access.

A LocalRepository is handed explicitly to whoever needs to read or change the
working tree. Only the orchestrator and the commit helper hold one, and every
command runs under the repository lock, so reads never interleave with writes.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from protected_push.services.github.git.subprocess_helpers import run_git_cmd
from protected_push.services.github.models.types import WorkingTreeStatus

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


class LocalRepository:
    """Git commands against one working directory."""

    def __init__(self, path: str, remote: str = REMOTE_NAME):
        """Initialize the repository handle.

        Args:
            path: Working directory of the repository
            remote: Name of the remote to fetch from and push to
        """
        self.path = path
        self.remote = remote
        self._lock = asyncio.Lock()

    async def _git(self, args: List[str], check: bool = True) -> Dict[str, str]:
        async with self._lock:
            return await run_git_cmd(args, cwd=self.path, check=check)

    async def is_repository(self) -> bool:
        """Check that the working directory is inside a git work tree."""
        result = await self._git(["rev-parse", "--is-inside-work-tree"], check=False)
        return result["returncode"] == 0 and result["stdout"].strip() == "true"

    async def working_tree_status(self) -> WorkingTreeStatus:
        """Classify changed paths as modified, staged or untracked.

        Returns:
            WorkingTreeStatus built from ``git status --porcelain``
        """
        result = await self._git(["status", "--porcelain"])
        status = WorkingTreeStatus()
        for line in result["stdout"].splitlines():
            if len(line) < 4:
                continue
            index_state, tree_state, path = line[0], line[1], line[3:].strip()
            if " -> " in path:
                path = path.split(" -> ", 1)[1]
            if index_state == "?" and tree_state == "?":
                status.untracked.append(path)
                continue
            if index_state not in (" ", "?"):
                status.staged.append(path)
            if tree_state not in (" ", "?"):
                status.modified.append(path)
        return status

    async def fetch(self) -> None:
        await self._git(["fetch", self.remote])

    async def fetch_branch(self, branch: str) -> None:
        """Fetch a single branch into its remote-tracking ref."""
        await self._git(
            ["fetch", self.remote, f"+refs/heads/{branch}:refs/remotes/{self.remote}/{branch}"]
        )

    async def list_branches(self) -> List[str]:
        """List local branch names and remote branches as ``<remote>/<name>``."""
        result = await self._git(["branch", "--all", "--format=%(refname)"])
        branches = []
        for ref in result["stdout"].splitlines():
            ref = ref.strip()
            if ref.startswith("refs/heads/"):
                branches.append(ref[len("refs/heads/"):])
            elif ref.startswith("refs/remotes/") and not ref.endswith("/HEAD"):
                branches.append(ref[len("refs/remotes/"):])
        return branches

    async def branch_exists(self, branch: str) -> bool:
        """Check the local and remote-tracking view for ``branch``."""
        branches = await self.list_branches()
        return branch in branches or f"{self.remote}/{branch}" in branches

    async def rev_parse(self, ref: str = "HEAD") -> str:
        result = await self._git(["rev-parse", ref])
        return result["stdout"].strip()

    async def ahead_count(self, target_branch: str) -> int:
        """Count commits on HEAD that ``<remote>/<target_branch>`` does not have."""
        head = await self.rev_parse("HEAD")
        result = await self._git(
            ["rev-list", "--count", f"{self.remote}/{target_branch}..{head}"]
        )
        return int(result["stdout"].strip() or "0")

    async def create_branch(self, branch: str) -> None:
        """Create ``branch`` at HEAD and force-check it out, dropping uncommitted changes."""
        await self._git(["checkout", "-f", "-b", branch])

    async def checkout(self, branch: str) -> None:
        await self._git(["checkout", branch])

    async def reset_hard(self, ref: str) -> None:
        await self._git(["reset", "--hard", ref])

    async def push(self, branch: str, force: bool = False) -> None:
        """Push ``branch`` to the remote branch of the same name."""
        args = ["push", self.remote, branch]
        if force:
            args.append("-f")
        await self._git(args)

    async def add_config(self, key: str, value: str) -> None:
        await self._git(["config", key, value])

    async def list_config(self) -> Dict[str, str]:
        result = await self._git(["config", "--list"])
        config = {}
        for line in result["stdout"].splitlines():
            key, _, value = line.partition("=")
            config[key] = value
        return config

    async def commit(self, message: str, extra_args: Optional[List[str]] = None) -> str:
        """Commit with ``message`` and return the new HEAD hash."""
        await self._git(["commit", "-m", message] + list(extra_args or []))
        return await self.rev_parse("HEAD")
