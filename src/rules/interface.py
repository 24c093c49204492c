from abc import ABC, abstractmethod

from src.rules.models import RepositorySettings


class RepositorySettingsProvider(ABC):
    """
    Abstract interface for fetching a repository's policy settings.

    Implementations must be safe to call concurrently for different deliveries.
    """

    @abstractmethod
    async def load(self, repository: str, installation_id: int) -> RepositorySettings | None:
        """
        Fetch settings for a specific repository.

        Args:
            repository: The repository in format "owner/repo"
            installation_id: The GitHub App installation ID for authentication

        Returns:
            The repository's settings, or None when it has no settings file
        """
        pass
