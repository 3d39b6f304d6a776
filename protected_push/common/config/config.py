"""
Action configuration.

Inputs arrive the way the CI runner exposes them: input ``name`` is read from
the ``INPUT_<NAME>`` environment variable. A local ``.env`` file is loaded
first so the action can be exercised outside the runner.
"""

import logging
import math
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from protected_push.common.exception.exceptions import ConfigurationError
from protected_push.common.utils.git_args import parse_git_args

load_dotenv()

logger = logging.getLogger(__name__)

GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
DEFAULT_TARGET_BRANCH = "master"
DEFAULT_TIMEOUT_SECONDS = "300"
DEFAULT_INTERVAL_SECONDS = "30"
DEFAULT_COMMIT_MESSAGE = "Automated commit from GitHub Actions"
TEMP_BRANCH_PREFIX = "push-action"

_TRUE_VALUES = {"true", "yes", "y", "on", "1"}
_FALSE_VALUES = {"false", "no", "n", "off", "0"}


def get_env(key: str) -> str:
    """Get environment variable or raise exception if not found."""
    value = os.getenv(key)
    if value is None:
        raise ConfigurationError(f"{key} not found")
    return value


def get_input(name: str, required: bool = False) -> str:
    """Read an action input from the environment.

    Args:
        name: Input name as declared for the action
        required: Raise when the input is empty

    Returns:
        The trimmed input value ('' when unset)
    """
    value = os.getenv(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Input '{name}' must be a boolean, got '{value}'")


class GitIdentity(BaseModel):
    """Author and committer used when the action commits on the caller's behalf."""

    model_config = ConfigDict(frozen=True)

    author_name: str
    author_email: str
    committer_name: str
    committer_email: str


class ActionInputs(BaseModel):
    """Validated inputs for one run."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    owner: str
    repo: str
    branch_to_push_to: str = DEFAULT_TARGET_BRANCH
    timeout_seconds: float = float(DEFAULT_TIMEOUT_SECONDS)
    interval_seconds: float = float(DEFAULT_INTERVAL_SECONDS)
    run_id: str = "local"
    should_commit: bool = False
    commit_message: Optional[str] = None
    commit_args: List[str] = Field(default_factory=list)
    git_config: Optional[GitIdentity] = None
    repository_path: str = "."

    @field_validator("timeout_seconds", "interval_seconds")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be non-negative")
        return value


def _parse_seconds(name: str, raw: str, default: str) -> float:
    text = raw or default
    try:
        seconds = float(text)
    except ValueError:
        seconds = math.nan
    if not math.isfinite(seconds):
        raise ConfigurationError(f"Input '{name}' must be a number of seconds, got '{text}'")
    return seconds


def _parse_repository(slug: str) -> tuple[str, str]:
    owner, _, repo = slug.partition("/")
    if not owner or not repo:
        raise ConfigurationError(f"GITHUB_REPOSITORY must look like 'owner/repo', got '{slug}'")
    return owner, repo


def _build_git_identity() -> GitIdentity:
    actor = os.getenv("GITHUB_ACTOR", "github-actions[bot]")
    author_name = get_input("authorName") or actor
    author_email = get_input("authorEmail") or f"{actor}@users.noreply.github.com"
    return GitIdentity(
        author_name=author_name,
        author_email=author_email,
        committer_name=get_input("commitAuthorName") or author_name,
        committer_email=get_input("commitAuthorEmail") or author_email,
    )


def get_inputs() -> ActionInputs:
    """Collect and validate every input for the current run.

    Returns:
        ActionInputs for the run

    Raises:
        ConfigurationError: If an input is missing or malformed
    """
    owner, repo = _parse_repository(get_env("GITHUB_REPOSITORY"))
    token = get_input("token", required=True)

    branch_to_push_to = get_input("branchToPushTo")
    if not branch_to_push_to:
        logger.info(f'> branchToPushTo was not specified, using "{DEFAULT_TARGET_BRANCH}"')
        branch_to_push_to = DEFAULT_TARGET_BRANCH

    timeout_seconds = _parse_seconds(
        "timeoutSeconds", get_input("timeoutSeconds"), DEFAULT_TIMEOUT_SECONDS
    )
    interval_seconds = _parse_seconds(
        "intervalSeconds", get_input("intervalSeconds"), DEFAULT_INTERVAL_SECONDS
    )

    should_commit = parse_bool("shouldCommit", get_input("shouldCommit") or "false")
    commit_message = None
    commit_args: List[str] = []
    git_config = None
    if should_commit:
        commit_message = get_input("commitMessage") or DEFAULT_COMMIT_MESSAGE
        try:
            commit_args = parse_git_args(get_input("commitArgs"))
        except ValueError as e:
            raise ConfigurationError(f"Input 'commitArgs' could not be parsed: {e}")
        git_config = _build_git_identity()

    try:
        return ActionInputs(
            token=token,
            owner=owner,
            repo=repo,
            branch_to_push_to=branch_to_push_to,
            timeout_seconds=timeout_seconds,
            interval_seconds=interval_seconds,
            run_id=os.getenv("GITHUB_RUN_ID") or "local",
            should_commit=should_commit,
            commit_message=commit_message,
            commit_args=commit_args,
            git_config=git_config,
            repository_path=os.getenv("GITHUB_WORKSPACE") or os.getcwd(),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid action inputs: {e}")
