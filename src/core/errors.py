"""
Core error classes for the GitHub monitor.
"""


class ConfigurationError(Exception):
    """Raised when required service configuration is missing."""

    pass


class GitHubApiError(Exception):
    """Raised when a GitHub REST call reports failure."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"GitHub API returned {status}: {message}")


class RepositorySettingsError(Exception):
    """Raised when a repository's policy file cannot be parsed."""

    def __init__(self, repository: str, reason: str) -> None:
        self.repository = repository
        self.reason = reason
        super().__init__(f"invalid repository settings in {repository}: {reason}")
