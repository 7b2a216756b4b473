"""CLI entry point reporting CI status for the current branch."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from gitlab_ci_status.client import GitLabClient
from gitlab_ci_status.errors import GitLabCIStatusError
from gitlab_ci_status.renderer import display_status
from gitlab_ci_status.repository import GitRepository

LOG_LEVEL_ENV = "GITLAB_CI_STATUS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

GIT_DIR = ".git"


def resolve_log_level(value: str | None) -> str:
    """Return a valid logging level name, falling back to the default."""
    level = (value or DEFAULT_LOG_LEVEL).upper()
    if level not in logging.getLevelNamesMapping():
        return DEFAULT_LOG_LEVEL
    return level


async def report_status(cwd: Path, console: Console) -> None:
    """Print the latest pipeline of the current branch and its jobs."""
    repository = await GitRepository.open(cwd)
    config = await repository.load_gitlab_config()

    branch = await repository.current_branch()
    console.print(Text.assemble("Branch: ", (branch, "cyan")))

    async with GitLabClient.from_config(config) as client:
        pipelines = await client.fetch_pipelines(branch)

        if not pipelines:
            console.print(Text("No pipelines found for this branch", style="yellow"))
            return

        latest_pipeline = pipelines[0]
        console.print(f"Pipeline ID: {latest_pipeline.id}")
        display_status(console, latest_pipeline.status, prefix="Status: ")

        jobs = await client.fetch_jobs(latest_pipeline.id)

    if jobs:
        console.print()
        console.print("Jobs:")
        for job in jobs:
            display_status(console, job.status, prefix=f"  {job.name} ({job.stage}) - ")


async def run(cwd: Path, console: Console, err_console: Console) -> int:
    """Report CI status and return exit code."""
    log = logging.getLogger("gitlab_ci_status")

    if not (cwd / GIT_DIR).exists():
        err_console.print(Text("Error: Not in a git repository", style="red"))
        return 1

    try:
        await report_status(cwd, console)
    except GitLabCIStatusError as exc:
        log.debug("Status report failed", exc_info=exc)
        err_console.print(Text(f"Error: {exc}", style="red"))
        return 1

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Show GitLab CI pipeline and job status for the current branch",
        epilog=(
            "Reads gitlab.server, gitlab.access-token and gitlab.project-name "
            "from git config."
        ),
    )
    parser.parse_args()

    logging.basicConfig(
        level=resolve_log_level(os.environ.get(LOG_LEVEL_ENV)),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            cwd=Path.cwd(),
            console=Console(highlight=False, soft_wrap=True),
            err_console=Console(stderr=True, highlight=False, soft_wrap=True),
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
