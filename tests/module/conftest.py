"""Fixtures for module tests using WireMock testcontainers."""

import subprocess
from collections.abc import Generator
from pathlib import Path

import docker
import pytest
from docker.errors import DockerException
from testcontainers.core import testcontainers_config
from wiremock.constants import Config
from wiremock.testing.testcontainer import WireMockContainer


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def _docker_available() -> None:
    """Skip module tests when no Docker daemon is reachable."""
    try:
        docker.from_env().ping()
    except DockerException as exc:
        pytest.skip(f"Docker is not available: {exc}")


@pytest.fixture(scope="session")
def wiremock_server(
    _docker_available: None,
) -> Generator[WireMockContainer, None, None]:
    """Start WireMock container using wiremock's testcontainer support."""
    with WireMockContainer(secure=False) as wm:
        Config.base_url = wm.get_url("__admin")
        yield wm
        print(wm.get_logs())


@pytest.fixture(scope="session")
def wiremock_url(wiremock_server: WireMockContainer) -> str:
    """URL for WireMock from the host running the tests."""
    return wiremock_server.get_base_url()


@pytest.fixture
def git_env(tmp_path: Path) -> dict[str, str]:
    """Environment isolating git from user and system configuration."""
    return {
        "GIT_CONFIG_GLOBAL": str(tmp_path / "gitconfig"),
        "GIT_CONFIG_NOSYSTEM": "1",
    }


@pytest.fixture
def gitlab_repo(tmp_path: Path, wiremock_url: str, git_env: dict[str, str]) -> Path:
    """Create a repository on branch main pointing at WireMock."""
    repo = tmp_path / "repo"
    repo.mkdir()

    for args in (
        ["init", "--initial-branch=main"],
        ["config", "user.email", "test@example.com"],
        ["config", "user.name", "Test"],
        ["commit", "--allow-empty", "-m", "Initial commit"],
        ["config", "gitlab.server", f"{wiremock_url}/"],
        ["config", "gitlab.access-token", "glpat-module-token"],
        ["config", "gitlab.project-name", "test-group/test-project"],
    ):
        subprocess.run(
            ["git", *args],
            cwd=repo,
            env=git_env,
            check=True,
            capture_output=True,
        )

    return repo
