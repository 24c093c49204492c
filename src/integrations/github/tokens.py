import base64
import time

import aiohttp
import jwt
import structlog
from cachetools import TTLCache

from src.core.config.github_config import GitHubConfig
from src.core.errors import ConfigurationError, GitHubApiError

logger = structlog.get_logger(__name__)


class InstallationTokenProvider:
    """
    Issues installation access tokens for a GitHub App.

    A short-lived JWT signed with the App's private key is exchanged for an
    installation token. Tokens are cached for 50 minutes; GitHub expires them
    after 60.
    """

    def __init__(self, github_config: GitHubConfig):
        self._config = github_config
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def get_token(self, session: aiohttp.ClientSession, installation_id: int) -> str:
        if installation_id in self._token_cache:
            logger.debug("installation_token_cached", installation_id=installation_id)
            return self._token_cache[installation_id]

        headers = {
            "Authorization": f"Bearer {self._generate_jwt()}",
            "Accept": "application/vnd.github.v3+json",
        }
        url = f"{self._config.api_base_url}/app/installations/{installation_id}/access_tokens"

        async with session.post(url, headers=headers) as response:
            if response.status != 201:
                error_text = await response.text()
                logger.error(
                    "installation_token_failed",
                    installation_id=installation_id,
                    status=response.status,
                    response=error_text,
                )
                raise GitHubApiError(response.status, error_text)
            data = await response.json()

        token = data["token"]
        self._token_cache[installation_id] = token
        logger.info("installation_token_issued", installation_id=installation_id)
        return token

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        now = int(time.time())
        payload = {
            # Backdated to tolerate clock drift
            "iat": now - 60,
            "exp": now + 9 * 60,
            "iss": self._config.app_id,
        }
        return jwt.encode(payload, self._decode_private_key(), algorithm="RS256")

    def _decode_private_key(self) -> str:
        """
        Decodes the base64-encoded private key from the configuration.

        Returns:
            The decoded private key as a string.
        """
        try:
            return base64.b64decode(self._config.private_key).decode("utf-8")
        except Exception as e:
            logger.error("private_key_invalid", error=str(e))
            raise ConfigurationError("Invalid private key format. Expected base64-encoded PEM key.") from e
