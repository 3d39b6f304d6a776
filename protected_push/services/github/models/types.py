"""
Shared types and models for the protected push flow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class CheckStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    WAITING = "waiting"
    REQUESTED = "requested"
    PENDING = "pending"


class CheckConclusion(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"
    STALE = "stale"


class RunOutcome(str, Enum):
    """Terminal result of one invocation."""

    SUCCEEDED = "succeeded"
    NO_CHECKS_REQUIRED = "no-checks-required"
    NOT_A_REPOSITORY = "not-a-repository"
    COMMIT_FAILED = "commit-failed"
    FETCH_FAILED = "fetch-failed"
    TARGET_BRANCH_MISSING = "target-branch-missing"
    NOT_AHEAD = "not-ahead"
    PROTECTION_LOOKUP_FAILED = "protection-lookup-failed"
    TEMP_BRANCH_CREATE_FAILED = "temp-branch-create-failed"
    TEMP_BRANCH_PUSH_FAILED = "temp-branch-push-failed"
    POLL_TIMEOUT = "poll-timeout"
    POLL_ERROR = "poll-error"
    REQUIRED_CHECK_FAILED = "required-check-failed"
    FAST_FORWARD_FAILED = "fast-forward-failed"
    UNEXPECTED_ERROR = "unexpected-error"

    @property
    def is_success(self) -> bool:
        return self in (RunOutcome.SUCCEEDED, RunOutcome.NO_CHECKS_REQUIRED)

    @property
    def exit_code(self) -> int:
        return 0 if self.is_success else 1


@dataclass(frozen=True)
class BranchRef:
    owner: str
    repo: str
    branch: str
    token: str = field(repr=False)

    def with_branch(self, branch: str) -> "BranchRef":
        """Same repository and credential, different branch."""
        return BranchRef(owner=self.owner, repo=self.repo, branch=branch, token=self.token)


@dataclass(frozen=True)
class CheckRun:
    name: str
    status: str
    conclusion: Optional[str] = None
    id: Optional[int] = None
    html_url: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == CheckStatus.COMPLETED.value

    @property
    def is_success(self) -> bool:
        return self.is_completed and self.conclusion == CheckConclusion.SUCCESS.value

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CheckRun":
        return cls(
            name=data["name"],
            status=data["status"],
            conclusion=data.get("conclusion"),
            id=data.get("id"),
            html_url=data.get("html_url"),
        )


@dataclass
class PollState:
    """Mutable state owned by a single poll operation."""

    started_at: float
    check_runs: List[CheckRun] = field(default_factory=list)
    attempts: int = 0
    elapsed: float = 0.0
    timed_out: bool = False


@dataclass
class WorkingTreeStatus:
    modified: List[str] = field(default_factory=list)
    staged: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.staged or self.untracked)


@dataclass
class RunResult:
    outcome: RunOutcome
    message: str
    temporary_branch: Optional[str] = None
    commit_hash: Optional[str] = None
    error: Optional[str] = None


def find_check_run(check_runs: List[CheckRun], name: str) -> Optional[CheckRun]:
    """Return the first check run called ``name``, if any."""
    for check_run in check_runs:
        if check_run.name == name:
            return check_run
    return None


def pending_required_checks(check_runs: List[CheckRun], required: List[str]) -> List[str]:
    """Names of required checks that are missing or have not completed yet."""
    pending = []
    for name in required:
        check_run = find_check_run(check_runs, name)
        if check_run is None or not check_run.is_completed:
            pending.append(name)
    return pending


def failed_required_checks(check_runs: List[CheckRun], required: List[str]) -> List[str]:
    """Names of required checks whose conclusion is not success."""
    failed = []
    for name in required:
        check_run = find_check_run(check_runs, name)
        if check_run is None or not check_run.is_success:
            failed.append(name)
    return failed
