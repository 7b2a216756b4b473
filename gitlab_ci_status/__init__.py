"""Report GitLab CI pipeline and job status for the current git branch."""
