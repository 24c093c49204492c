"""
GitHub API adapter.

This package provides the installation-scoped REST client and its factory.
"""

from src.integrations.github.api import BranchProtection, GitHubClient, MergeResult
from src.integrations.github.factory import GitHubClientFactory, github_client_factory

__all__ = [
    "BranchProtection",
    "GitHubClient",
    "GitHubClientFactory",
    "MergeResult",
    "github_client_factory",
]
