from protected_push.common.exception.exceptions import (
    AuthError,
    CommitError,
    ConfigurationError,
    GitCommandError,
    GitHubAPIError,
    NotFoundOrUnauthorized,
    PollTimeoutError,
    PushActionError,
    RefNotReady,
)

__all__ = [
    "AuthError",
    "CommitError",
    "ConfigurationError",
    "GitCommandError",
    "GitHubAPIError",
    "NotFoundOrUnauthorized",
    "PollTimeoutError",
    "PushActionError",
    "RefNotReady",
]
