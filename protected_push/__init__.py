"""Push workflow commits to protected branches once their required status checks pass."""

__version__ = "1.0.0"
