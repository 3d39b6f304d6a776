"""
GitHub API Module

Handles the GitHub REST API interactions used by the action:
- Required status checks of a protected branch
- Check runs reported for a ref
- Remote branch lookup and deletion
"""

from protected_push.services.github.api.branch_protection import BranchProtectionOperations
from protected_push.services.github.api.check_suites import CheckSuitePoller
from protected_push.services.github.api.client import GitHubAPIClient

__all__ = [
    "GitHubAPIClient",
    "BranchProtectionOperations",
    "CheckSuitePoller",
]
