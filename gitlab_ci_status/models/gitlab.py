"""Pydantic models for GitLab configuration and API responses."""

from pydantic import ConfigDict, Field, NonNegativeInt, SecretStr

from gitlab_ci_status.models.base import Model


class GitLabConfig(Model):
    """GitLab connection settings read from git configuration."""

    server: str = Field(..., description="GitLab base URL (gitlab.server)")
    access_token: SecretStr = Field(
        ..., description="Personal or project access token (gitlab.access-token)"
    )
    project_name: str = Field(
        ..., description="Project path or numeric id (gitlab.project-name)"
    )


class Pipeline(Model):
    """A pipeline from the GitLab pipelines API.

    Status is kept as a free-form string since GitLab adds new values over time.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: NonNegativeInt
    status: str
    ref_field: str = ""
    ref_name: str = Field(..., alias="ref")


class Job(Model):
    """A job belonging to a pipeline."""

    id: NonNegativeInt
    status: str
    name: str
    stage: str
