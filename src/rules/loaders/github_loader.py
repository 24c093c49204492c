"""
GitHub-based settings loader.

Loads repository settings from a YAML file in the repository itself,
implementing the RepositorySettingsProvider interface.
"""

import structlog
import yaml
from pydantic import ValidationError

from src.core.config import config
from src.core.errors import RepositorySettingsError
from src.integrations.github import GitHubClientFactory, github_client_factory
from src.rules.interface import RepositorySettingsProvider
from src.rules.models import RepositorySettings

logger = structlog.get_logger(__name__)


class GitHubSettingsLoader(RepositorySettingsProvider):
    """
    Reads the monitor settings file from the repository's default branch.
    Settings are read on every call; nothing is cached.
    """

    def __init__(self, client_factory: GitHubClientFactory, settings_file: str | None = None):
        self.client_factory = client_factory
        self.settings_file = settings_file or config.repo_config.settings_file

    async def load(self, repository: str, installation_id: int) -> RepositorySettings | None:
        log = logger.bind(repo=repository, installation_id=installation_id, settings_file=self.settings_file)

        client = await self.client_factory.create(installation_id)
        content = await client.get_file_content(repository, self.settings_file)
        if content is None:
            log.info("repository_settings_not_found")
            return None

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            log.warning("repository_settings_invalid_yaml", error=str(e))
            raise RepositorySettingsError(repository, f"invalid YAML: {e}") from e

        if data is None:
            # Empty file: present but nothing enabled
            return RepositorySettings()
        if not isinstance(data, dict):
            raise RepositorySettingsError(repository, "top level must be a mapping")

        try:
            settings = RepositorySettings.model_validate(data)
        except ValidationError as e:
            log.warning("repository_settings_invalid", error=str(e))
            raise RepositorySettingsError(repository, str(e)) from e

        log.info("repository_settings_loaded", enabled=settings.enabled)
        return settings


github_settings_loader = GitHubSettingsLoader(github_client_factory)
