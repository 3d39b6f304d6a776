"""Subprocess execution helpers for git operations."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from protected_push.common.exception.exceptions import GitCommandError

logger = logging.getLogger(__name__)

GIT_COMMAND_TIMEOUT_SECONDS = 300


async def run_subprocess(
    cmd: List[str],
    cwd: Optional[str] = None,
    timeout: Optional[float] = GIT_COMMAND_TIMEOUT_SECONDS,
    check: bool = False,
) -> Dict[str, Any]:
    """Run subprocess safely.

    Args:
        cmd: Command and arguments list
        cwd: Working directory (optional)
        timeout: Timeout in seconds (optional)
        check: Whether to raise exception on non-zero return code

    Returns:
        Dictionary with returncode, stdout, stderr

    Raises:
        GitCommandError: If check=True and command fails
        asyncio.TimeoutError: If command times out
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise asyncio.TimeoutError(f"Command {' '.join(cmd)} timed out")

    result = {
        "returncode": process.returncode,
        "stdout": stdout.decode(errors="replace"),
        "stderr": stderr.decode(errors="replace"),
    }
    if result["stdout"].strip():
        logger.debug(result["stdout"].strip())

    if check and process.returncode != 0:
        logger.error(f"Command {' '.join(cmd)} failed: {result['stderr'].strip()}")
        raise GitCommandError(cmd, process.returncode, result["stderr"], result["stdout"])

    return result


async def run_git_cmd(
    args: List[str], cwd: Optional[str] = None, check: bool = True
) -> Dict[str, Any]:
    """Helper to run git commands.

    Args:
        args: Git command arguments (without 'git' prefix)
        cwd: Repository directory
        check: Whether to raise exception on failure

    Returns:
        Dictionary with returncode, stdout, stderr
    """
    return await run_subprocess(["git"] + args, cwd=cwd, check=check)
