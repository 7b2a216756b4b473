"""Errors raised while collecting CI status."""


class GitLabCIStatusError(Exception):
    """Base class for all errors reported to the user."""


class RepositoryError(GitLabCIStatusError):
    """Raised when the git repository or its HEAD cannot be read."""


class ConfigError(GitLabCIStatusError):
    """Raised when a required git configuration key is missing."""

    def __init__(self, key: str) -> None:
        super().__init__(f"{key} not found in git config")
        self.key = key


class NetworkError(GitLabCIStatusError):
    """Raised when the GitLab server cannot be reached."""


class ApiError(GitLabCIStatusError):
    """Raised when GitLab answers with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"GitLab API request failed: {status_code}")
        self.status_code = status_code


class DecodeError(GitLabCIStatusError):
    """Raised when a response body does not have the expected shape."""
