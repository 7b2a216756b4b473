"""Fixtures for integration tests."""

import subprocess
from pathlib import Path
from typing import Protocol

import pytest


class GitFn(Protocol):
    """Protocol for running git in the test repository."""

    def __call__(self, *args: str) -> str:
        """Run git with the given arguments and return its output."""


@pytest.fixture(autouse=True)
def _isolate_git_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user and system git configuration out of the tests."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository with one commit on branch main."""
    repo = tmp_path / "repo"
    repo.mkdir()
    for args in (
        ["init", "--initial-branch=main"],
        ["config", "user.email", "test@example.com"],
        ["config", "user.name", "Test"],
        ["commit", "--allow-empty", "-m", "Initial commit"],
    ):
        subprocess.run(
            ["git", *args],
            cwd=repo,
            check=True,
            capture_output=True,
        )
    return repo


@pytest.fixture
def git(git_repo: Path) -> GitFn:
    """Return a function to run git commands in the test repo."""

    def _git(*args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=git_repo,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip()

    return _git


@pytest.fixture
def gitlab_repo(git: GitFn, git_repo: Path) -> Path:
    """Create a repository with GitLab settings in its git config."""
    git("config", "gitlab.server", "http://gitlab.test/")
    git("config", "gitlab.access-token", "glpat-test-token")
    git("config", "gitlab.project-name", "test-group/test-project")
    return git_repo
