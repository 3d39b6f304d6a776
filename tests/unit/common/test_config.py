"""Tests for action input loading."""

import pytest

from protected_push.common.config.config import (
    DEFAULT_COMMIT_MESSAGE,
    get_input,
    get_inputs,
    parse_bool,
)
from protected_push.common.exception.exceptions import ConfigurationError


@pytest.fixture
def runner_env(monkeypatch):
    """Minimal environment of a workflow run."""
    for key in (
        "INPUT_BRANCHTOPUSHTO",
        "INPUT_TIMEOUTSECONDS",
        "INPUT_INTERVALSECONDS",
        "INPUT_SHOULDCOMMIT",
        "INPUT_COMMITMESSAGE",
        "INPUT_COMMITARGS",
        "INPUT_AUTHORNAME",
        "INPUT_AUTHOREMAIL",
        "INPUT_COMMITAUTHORNAME",
        "INPUT_COMMITAUTHOREMAIL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/widgets")
    monkeypatch.setenv("GITHUB_RUN_ID", "4242")
    monkeypatch.setenv("GITHUB_ACTOR", "octocat")
    monkeypatch.setenv("GITHUB_WORKSPACE", "/work/widgets")
    monkeypatch.setenv("INPUT_TOKEN", "ghs_secret")
    return monkeypatch


class TestGetInput:
    """Test reading single inputs."""

    def test_get_input_trims_whitespace(self, monkeypatch):
        """Test input values are trimmed."""
        monkeypatch.setenv("INPUT_BRANCHTOPUSHTO", "  release  ")
        assert get_input("branchToPushTo") == "release"

    def test_get_input_replaces_spaces(self, monkeypatch):
        """Test spaces in input names map to underscores."""
        monkeypatch.setenv("INPUT_MY_INPUT", "value")
        assert get_input("my input") == "value"

    def test_get_input_required_missing(self, monkeypatch):
        """Test a missing required input raises ConfigurationError."""
        monkeypatch.delenv("INPUT_TOKEN", raising=False)
        with pytest.raises(ConfigurationError):
            get_input("token", required=True)

    def test_parse_bool(self):
        """Test boolean parsing accepts common spellings."""
        assert parse_bool("x", "TRUE") is True
        assert parse_bool("x", "no") is False
        with pytest.raises(ConfigurationError):
            parse_bool("x", "maybe")


class TestGetInputs:
    """Test assembling the full input set."""

    def test_defaults(self, runner_env):
        """Test defaults for optional inputs."""
        inputs = get_inputs()

        assert inputs.owner == "octo"
        assert inputs.repo == "widgets"
        assert inputs.branch_to_push_to == "master"
        assert inputs.timeout_seconds == 300
        assert inputs.interval_seconds == 30
        assert inputs.run_id == "4242"
        assert inputs.should_commit is False
        assert inputs.git_config is None
        assert inputs.repository_path == "/work/widgets"

    def test_missing_token(self, runner_env):
        """Test the token is required."""
        runner_env.delenv("INPUT_TOKEN")
        with pytest.raises(ConfigurationError):
            get_inputs()

    def test_invalid_repository_slug(self, runner_env):
        """Test GITHUB_REPOSITORY must be owner/repo."""
        runner_env.setenv("GITHUB_REPOSITORY", "widgets")
        with pytest.raises(ConfigurationError):
            get_inputs()

    def test_non_numeric_interval(self, runner_env):
        """Test a non-numeric interval is rejected."""
        runner_env.setenv("INPUT_INTERVALSECONDS", "soon")
        with pytest.raises(ConfigurationError):
            get_inputs()

    def test_negative_interval(self, runner_env):
        """Test a negative interval is rejected."""
        runner_env.setenv("INPUT_INTERVALSECONDS", "-5")
        with pytest.raises(ConfigurationError):
            get_inputs()

    def test_nan_timeout(self, runner_env):
        """Test NaN is not accepted as a number of seconds."""
        runner_env.setenv("INPUT_TIMEOUTSECONDS", "nan")
        with pytest.raises(ConfigurationError):
            get_inputs()

    def test_commit_inputs_default_identity(self, runner_env):
        """Test identity defaults to the triggering actor and committer mirrors the author."""
        runner_env.setenv("INPUT_SHOULDCOMMIT", "true")
        runner_env.setenv("INPUT_COMMITARGS", "-a --no-verify")

        inputs = get_inputs()

        assert inputs.should_commit is True
        assert inputs.commit_message == DEFAULT_COMMIT_MESSAGE
        assert inputs.commit_args == ["-a", "--no-verify"]
        assert inputs.git_config.author_name == "octocat"
        assert inputs.git_config.author_email == "octocat@users.noreply.github.com"
        assert inputs.git_config.committer_name == "octocat"
        assert inputs.git_config.committer_email == "octocat@users.noreply.github.com"

    def test_commit_inputs_explicit_identity(self, runner_env):
        """Test explicit author and committer inputs win over defaults."""
        runner_env.setenv("INPUT_SHOULDCOMMIT", "yes")
        runner_env.setenv("INPUT_COMMITMESSAGE", "chore: regenerate")
        runner_env.setenv("INPUT_AUTHORNAME", "Release Bot")
        runner_env.setenv("INPUT_AUTHOREMAIL", "bot@example.com")
        runner_env.setenv("INPUT_COMMITAUTHORNAME", "Merger")

        inputs = get_inputs()

        assert inputs.commit_message == "chore: regenerate"
        assert inputs.git_config.author_name == "Release Bot"
        assert inputs.git_config.committer_name == "Merger"
        assert inputs.git_config.committer_email == "bot@example.com"

    def test_unbalanced_commit_args(self, runner_env):
        """Test commit arguments with unbalanced quotes are rejected."""
        runner_env.setenv("INPUT_SHOULDCOMMIT", "true")
        runner_env.setenv("INPUT_COMMITARGS", "--author='Bot")
        with pytest.raises(ConfigurationError):
            get_inputs()
