"""Read GitLab settings and the current branch from a local git repository."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import SecretStr

from gitlab_ci_status.errors import ConfigError, RepositoryError
from gitlab_ci_status.models.gitlab import GitLabConfig

log = logging.getLogger(__name__)

SERVER_KEY = "gitlab.server"
ACCESS_TOKEN_KEY = "gitlab.access-token"
PROJECT_NAME_KEY = "gitlab.project-name"

# `git config --get` exits with 1 when the key is not set.
GIT_CONFIG_KEY_MISSING = 1


@dataclass(frozen=True, kw_only=True)
class GitResult:
    """Outcome of a git invocation."""

    returncode: int | None
    stdout: str
    stderr: str


async def run_git(path: Path, args: Sequence[str]) -> GitResult:
    """Run a git command in ``path`` and capture its output."""
    log.debug("Running git %s in %s", " ".join(args), path)
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise RepositoryError(f"Failed to run git: {exc}") from exc

    stdout, stderr = await process.communicate()

    try:
        output = stdout.decode().strip()
    except UnicodeDecodeError as exc:
        raise RepositoryError(
            f"git {args[0]} returned output that is not valid UTF-8"
        ) from exc

    return GitResult(
        returncode=process.returncode,
        stdout=output,
        stderr=stderr.decode(errors="replace").strip(),
    )


@dataclass(frozen=True, kw_only=True)
class GitRepository:
    """Read-only handle on a git work tree."""

    path: Path

    @classmethod
    async def open(cls, path: Path) -> "GitRepository":
        """Open the repository containing ``path``.

        Raises:
            RepositoryError: If ``path`` is not inside a git repository

        """
        result = await run_git(path, ["rev-parse", "--git-dir"])
        if result.returncode != 0:
            raise RepositoryError(f"Failed to open git repository: {result.stderr}")
        return cls(path=path)

    async def get_config_value(self, key: str) -> str:
        """Return the value of a git configuration key.

        Raises:
            ConfigError: If the key is not set
            RepositoryError: If git cannot read the configuration

        """
        result = await run_git(self.path, ["config", "--get", key])
        if result.returncode == GIT_CONFIG_KEY_MISSING:
            raise ConfigError(key)
        if result.returncode != 0:
            raise RepositoryError(f"Failed to get git config: {result.stderr}")
        return result.stdout

    async def load_gitlab_config(self) -> GitLabConfig:
        """Load the GitLab connection settings from git configuration."""
        server = await self.get_config_value(SERVER_KEY)
        access_token = await self.get_config_value(ACCESS_TOKEN_KEY)
        project_name = await self.get_config_value(PROJECT_NAME_KEY)

        log.info("Using GitLab server %s, project %s", server, project_name)
        return GitLabConfig(
            server=server,
            access_token=SecretStr(access_token),
            project_name=project_name,
        )

    async def current_branch(self) -> str:
        """Return the short name of the checked-out branch.

        Raises:
            RepositoryError: If HEAD is detached, unborn or cannot be read

        """
        result = await run_git(self.path, ["symbolic-ref", "--short", "HEAD"])
        if result.returncode != 0 or not result.stdout:
            raise RepositoryError(f"Failed to get branch name: {result.stderr}")

        # An unborn branch has a name but no commit behind it.
        head = await run_git(self.path, ["rev-parse", "--verify", "--quiet", "HEAD"])
        if head.returncode != 0:
            raise RepositoryError("Failed to get HEAD")

        return result.stdout
