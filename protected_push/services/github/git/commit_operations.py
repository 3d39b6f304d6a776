"""Commit operations performed on behalf of the workflow."""

import json
import logging
from typing import List, Optional

from protected_push.common.config.config import GitIdentity
from protected_push.common.exception.exceptions import CommitError, GitCommandError
from protected_push.common.utils.result import to
from protected_push.services.github.git.repository import LocalRepository

logger = logging.getLogger(__name__)


async def configure_git_identity(repository: LocalRepository, identity: GitIdentity) -> None:
    """Write author and committer identity into the repository config.

    Set on every run, never assumed from a previous one.

    Args:
        repository: Repository to configure
        identity: Author and committer names and emails
    """
    settings = [
        ("user.email", identity.author_email),
        ("user.name", identity.author_name),
        ("author.email", identity.author_email),
        ("author.name", identity.author_name),
        ("committer.email", identity.committer_email),
        ("committer.name", identity.committer_name),
    ]
    for key, value in settings:
        await repository.add_config(key, value)


async def commit(
    repository: LocalRepository,
    commit_message: str,
    commit_args: Optional[List[str]],
    identity: GitIdentity,
) -> str:
    """Create a commit from the current working tree.

    Args:
        repository: Repository to commit in
        commit_message: Commit message
        commit_args: Extra ``git commit`` arguments, forwarded verbatim
        identity: Author and committer identity

    Returns:
        Hash of the new commit

    Raises:
        GitCommandError: If the identity cannot be configured
        CommitError: If ``git commit`` fails
    """
    try:
        await configure_git_identity(repository, identity)
    except GitCommandError:
        logger.error("> Failed while setting up git config. Aborting")
        raise

    git_config = await repository.list_config()
    logger.info(f"> Current git config\n{json.dumps(git_config, indent=2)}")

    logger.info("> Creating commit...")
    commit_hash, commit_error = await to(repository.commit(commit_message, commit_args))
    if commit_error:
        raise CommitError(f"Error while creating commit. Aborting. {commit_error}")

    logger.info(f"> Created commit {commit_hash}")
    return commit_hash
