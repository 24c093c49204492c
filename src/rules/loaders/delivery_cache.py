"""
Per-delivery settings cache.

Wraps another provider so that all handlers of one webhook delivery see the
same settings snapshot and the settings file is fetched only once.
"""

import structlog

from src.rules.interface import RepositorySettingsProvider
from src.rules.models import RepositorySettings

logger = structlog.get_logger(__name__)


class DeliverySettingsCache(RepositorySettingsProvider):
    """
    Memoizes ``load`` for the lifetime of one delivery.

    A failed load is memoized too: later handlers receive the same exception
    instance, which lets the dispatcher report it only once.
    """

    def __init__(self, provider: RepositorySettingsProvider):
        self._provider = provider
        self._loaded: dict[tuple[str, int], RepositorySettings | None] = {}
        self._failed: dict[tuple[str, int], Exception] = {}

    async def load(self, repository: str, installation_id: int) -> RepositorySettings | None:
        key = (repository, installation_id)
        if key in self._failed:
            raise self._failed[key]
        if key in self._loaded:
            logger.debug("repository_settings_reused", repo=repository, installation_id=installation_id)
            return self._loaded[key]

        try:
            settings = await self._provider.load(repository, installation_id)
        except Exception as e:
            self._failed[key] = e
            raise

        self._loaded[key] = settings
        return settings
