"""
GitHub Models Module

Shared types, enums, and dataclasses for the protected push flow.
"""

from protected_push.services.github.models.types import (
    BranchRef,
    CheckConclusion,
    CheckRun,
    CheckStatus,
    PollState,
    RunOutcome,
    RunResult,
    WorkingTreeStatus,
)

__all__ = [
    "BranchRef",
    "CheckConclusion",
    "CheckRun",
    "CheckStatus",
    "PollState",
    "RunOutcome",
    "RunResult",
    "WorkingTreeStatus",
]
