"""Tests for the commit helper."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from protected_push.common.config.config import GitIdentity
from protected_push.common.exception.exceptions import CommitError, GitCommandError
from protected_push.services.github.git.commit_operations import commit

IDENTITY = GitIdentity(
    author_name="Release Bot",
    author_email="bot@example.com",
    committer_name="Merger",
    committer_email="merger@example.com",
)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.add_config = AsyncMock()
    repo.list_config = AsyncMock(return_value={"user.name": "Release Bot"})
    repo.commit = AsyncMock(return_value="deadbeef")
    return repo


class TestCommit:
    """Test commit()."""

    @pytest.mark.asyncio
    async def test_commit_sets_identity_and_commits(self, repository):
        """Test identity is written every run before committing."""
        commit_hash = await commit(repository, "chore: update", ["-a", "--no-verify"], IDENTITY)

        assert commit_hash == "deadbeef"
        settings = [call.args for call in repository.add_config.await_args_list]
        assert settings == [
            ("user.email", "bot@example.com"),
            ("user.name", "Release Bot"),
            ("author.email", "bot@example.com"),
            ("author.name", "Release Bot"),
            ("committer.email", "merger@example.com"),
            ("committer.name", "Merger"),
        ]
        repository.commit.assert_awaited_once_with("chore: update", ["-a", "--no-verify"])

    @pytest.mark.asyncio
    async def test_commit_failure_raises_commit_error(self, repository):
        """Test a failing git commit raises CommitError."""
        repository.commit.side_effect = GitCommandError(
            ["git", "commit"], 1, stdout="nothing to commit, working tree clean"
        )

        with pytest.raises(CommitError) as exc_info:
            await commit(repository, "chore: update", [], IDENTITY)

        assert "nothing to commit" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_config_failure_propagates(self, repository):
        """Test a failing git config aborts before committing."""
        repository.add_config.side_effect = GitCommandError(["git", "config"], 255, "could not lock config file")

        with pytest.raises(GitCommandError):
            await commit(repository, "chore: update", [], IDENTITY)

        repository.commit.assert_not_awaited()
