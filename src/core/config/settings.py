"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from src.core.config.github_config import GitHubConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.repo_config import RepoConfig
from src.core.errors import ConfigurationError

# Load environment variables from a .env file
load_dotenv()


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_id=os.getenv("APP_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("API_BASE_URL_GITHUB", "https://api.github.com"),
        )

        self.repo_config = RepoConfig(
            settings_file=os.getenv("REPO_SETTINGS_FILE", ".github/ahk-monitor.yml"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)8s %(message)s"),
            json=os.getenv("LOG_JSON", "false").lower() == "true",
        )

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    def missing_github_settings(self) -> list[str]:
        """Names of the required GitHub App settings that are not set."""
        missing = []

        if not self.github.app_id:
            missing.append("APP_ID_GITHUB")

        if not self.github.private_key:
            missing.append("PRIVATE_KEY_BASE64_GITHUB")

        if not self.github.webhook_secret:
            missing.append("WEBHOOK_SECRET_GITHUB")

        return missing

    def validate(self) -> bool:
        """Validate configuration."""
        errors = [f"{name} is required" for name in self.missing_github_settings()]

        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
