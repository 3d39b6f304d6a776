"""Exception types raised by the protected push action."""

from typing import List, Optional


class PushActionError(Exception):
    """Base class for all errors raised by the action."""

    pass


class ConfigurationError(PushActionError):
    """Raised when an action input is missing or invalid."""

    pass


class GitCommandError(PushActionError):
    """Raised when a local git command exits with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: str = "", stdout: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        detail = stderr.strip() or stdout.strip()
        super().__init__(
            f"Command '{' '.join(command)}' failed with exit code {returncode}: {detail}"
        )


class CommitError(PushActionError):
    """Raised when the commit helper cannot produce a commit."""

    pass


class GitHubAPIError(PushActionError):
    """Raised when a GitHub REST API request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class AuthError(GitHubAPIError):
    """The token was rejected (HTTP 401)."""

    pass


class NotFoundOrUnauthorized(GitHubAPIError):
    """The branch does not exist, is not protected, or the token cannot read it."""

    pass


class RefNotReady(GitHubAPIError):
    """The ref cannot be resolved yet, usually because a push has not propagated."""

    pass


class PollTimeoutError(PushActionError):
    """Raised when required checks do not finish before the poll timeout."""

    def __init__(self, timeout_seconds: float, pending: Optional[List[str]] = None):
        self.timeout_seconds = timeout_seconds
        self.pending = pending or []
        message = f"Timeout of {timeout_seconds:g} seconds reached."
        if self.pending:
            message += f" Still waiting on: {', '.join(self.pending)}"
        super().__init__(message)
