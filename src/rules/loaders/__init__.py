"""
Settings loaders package.

This package contains implementations of the RepositorySettingsProvider
interface for loading repository settings from different sources.
"""

from src.rules.loaders.delivery_cache import DeliverySettingsCache
from src.rules.loaders.github_loader import GitHubSettingsLoader, github_settings_loader

__all__ = [
    "DeliverySettingsCache",
    "GitHubSettingsLoader",
    "github_settings_loader",
]
