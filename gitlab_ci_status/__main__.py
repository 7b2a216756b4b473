"""Allow running as ``python -m gitlab_ci_status``."""

from gitlab_ci_status.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
