"""
Git Operations Module

Handles local git command operations:
- Repository inspection (status, branches, ahead count)
- Branch staging, reset and push
- Commits on behalf of the workflow
"""

from protected_push.services.github.git.commit_operations import commit, configure_git_identity
from protected_push.services.github.git.repository import LocalRepository

__all__ = [
    "LocalRepository",
    "commit",
    "configure_git_identity",
]
