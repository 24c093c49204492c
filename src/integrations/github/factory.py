import aiohttp
import structlog

from src.core.config import config
from src.core.config.github_config import GitHubConfig
from src.integrations.github.api import GitHubClient
from src.integrations.github.tokens import InstallationTokenProvider

logger = structlog.get_logger(__name__)


class GitHubClientFactory:
    """
    Creates installation-scoped GitHub clients.

    Safe for concurrent use within one event loop: the token cache and the
    aiohttp session are the only shared state.
    """

    def __init__(self, github_config: GitHubConfig, token_provider: InstallationTokenProvider | None = None):
        self._config = github_config
        self._token_provider = token_provider or InstallationTokenProvider(github_config)
        self._session: aiohttp.ClientSession | None = None

    async def create(self, installation_id: int) -> GitHubClient:
        session = await self._get_session()
        token = await self._token_provider.get_token(session, installation_id)
        return GitHubClient(session, token, api_base_url=self._config.api_base_url)

    async def close(self) -> None:
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.info("github_session_closed")

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session


# Global instance
github_client_factory = GitHubClientFactory(config.github)
