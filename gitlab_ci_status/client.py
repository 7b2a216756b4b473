"""GitLab REST API v4 client for pipelines and jobs."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from urllib.parse import quote

import aiohttp
from pydantic import TypeAdapter, ValidationError

from gitlab_ci_status.errors import ApiError, DecodeError, NetworkError
from gitlab_ci_status.models.gitlab import GitLabConfig, Job, Pipeline

log = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0

PIPELINES_ADAPTER = TypeAdapter(list[Pipeline])
JOBS_ADAPTER = TypeAdapter(list[Job])


def project_api_url(server: str, project_name: str) -> str:
    """Return the API URL of a project, encoding its path or id."""
    encoded_project = quote(project_name, safe="")
    return f"{server.rstrip('/')}/api/v4/projects/{encoded_project}"


def build_pipelines_url(server: str, project_name: str, branch: str) -> str:
    """Return the URL listing pipelines for a branch, newest first."""
    return f"{project_api_url(server, project_name)}/pipelines?ref={branch}"


def build_jobs_url(server: str, project_name: str, pipeline_id: int) -> str:
    """Return the URL listing the jobs of a pipeline."""
    return f"{project_api_url(server, project_name)}/pipelines/{pipeline_id}/jobs"


@dataclass(frozen=True, kw_only=True)
class GitLabClient:
    """Read-only client authenticated with a PRIVATE-TOKEN header.

    Requests are issued one at a time; the session is shared between them.
    """

    config: GitLabConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitLabConfig, timeout: float = REQUEST_TIMEOUT
    ) -> AsyncGenerator["GitLabClient", None]:
        """Create client with managed session lifecycle."""
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as session:
            yield cls(config=config, session=session)

    async def fetch_pipelines(self, branch: str) -> Sequence[Pipeline]:
        """Get the pipelines of a branch in the order GitLab returns them."""
        url = build_pipelines_url(self.config.server, self.config.project_name, branch)
        body = await self._get(url)

        try:
            pipelines = PIPELINES_ADAPTER.validate_json(body)
        except ValidationError as exc:
            log.debug("Invalid pipelines payload: %s", exc)
            raise DecodeError("Failed to parse pipeline response") from exc

        log.info("Found %d pipeline(s) for branch %s", len(pipelines), branch)
        return pipelines

    async def fetch_jobs(self, pipeline_id: int) -> Sequence[Job]:
        """Get the jobs of a pipeline in the order GitLab returns them."""
        url = build_jobs_url(self.config.server, self.config.project_name, pipeline_id)
        body = await self._get(url)

        try:
            jobs = JOBS_ADAPTER.validate_json(body)
        except ValidationError as exc:
            log.debug("Invalid jobs payload: %s", exc)
            raise DecodeError("Failed to parse jobs response") from exc

        log.info("Found %d job(s) for pipeline %s", len(jobs), pipeline_id)
        return jobs

    async def _get(self, url: str) -> bytes:
        """Send an authenticated GET and return the raw body of a 2xx response."""
        headers = {"PRIVATE-TOKEN": self.config.access_token.get_secret_value()}

        log.debug("GET %s", url)
        try:
            async with self.session.get(url, headers=headers) as response:
                if not 200 <= response.status < 300:
                    text = await response.text(errors="replace")
                    log.debug("GitLab responded %s: %s", response.status, text)
                    raise ApiError(response.status)
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            raise NetworkError(
                f"Failed to send request to GitLab API: {reason}"
            ) from exc
