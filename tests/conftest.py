"""
Pytest configuration: project root on sys.path plus shared webhook fixtures.
"""

import sys
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.integrations.github import GitHubClient, GitHubClientFactory, MergeResult  # noqa: E402
from src.rules.interface import RepositorySettingsProvider  # noqa: E402
from src.rules.models import RepositorySettings  # noqa: E402
from src.webhooks.handlers.base import HandlerDependencies  # noqa: E402

REPOSITORY = {
    "id": 1296269,
    "name": "hello-world",
    "full_name": "octocat/hello-world",
    "private": False,
    "default_branch": "main",
}
INSTALLATION_ID = 4242


def make_user(login: str, user_id: int = 1, user_type: str = "User") -> dict[str, Any]:
    return {"login": login, "id": user_id, "type": user_type}


@pytest.fixture
def enabled_settings() -> RepositorySettings:
    """Repository settings with every policy switched on."""
    return RepositorySettings(
        enabled=True,
        branch_protection={"enabled": True, "required_status_checks": ["ci"], "required_approving_review_count": 2},
        comment_protection={"enabled": True, "warning_text": "Do not touch other people's comments."},
        multiple_pr_protection={"enabled": True, "warning_text": "Duplicate pull request."},
        reviewer_to_assignee={"enabled": True},
        pull_request_comment_command={"enabled": True},
    )


@pytest.fixture
def github_client() -> AsyncMock:
    client = AsyncMock(spec=GitHubClient)
    client.merge_pull_request.return_value = MergeResult(merged=True, message="Pull Request successfully merged")
    client.list_pull_requests.return_value = []
    client.create_issue_comment.return_value = {"id": 1}
    client.update_branch_protection.return_value = {}
    client.add_assignees.return_value = {}
    return client


@pytest.fixture
def client_factory(github_client: AsyncMock) -> MagicMock:
    factory = MagicMock(spec=GitHubClientFactory)
    factory.create = AsyncMock(return_value=github_client)
    return factory


@pytest.fixture
def settings_provider(enabled_settings: RepositorySettings) -> AsyncMock:
    provider = AsyncMock(spec=RepositorySettingsProvider)
    provider.load.return_value = enabled_settings
    return provider


@pytest.fixture
def deps(settings_provider: AsyncMock, client_factory: MagicMock) -> HandlerDependencies:
    return HandlerDependencies(settings_provider=settings_provider, client_factory=client_factory)


@pytest.fixture
def issue_comment_payload():
    """Builder for issue_comment deliveries; defaults describe a "+ok" on PR #7."""

    def build(
        action: str = "created",
        body: str = "+ok",
        commenter: str = "octocat",
        association: str = "COLLABORATOR",
        sender: str | None = None,
        issue_number: int = 7,
        title: str = "Fix bug",
        on_pull_request: bool = True,
    ) -> dict[str, Any]:
        issue: dict[str, Any] = {"number": issue_number, "title": title, "state": "open"}
        if on_pull_request:
            issue["pull_request"] = {"url": f"https://api.github.com/repos/octocat/hello-world/pulls/{issue_number}"}
        return {
            "action": action,
            "issue": issue,
            "comment": {
                "id": 99,
                "body": body,
                "user": make_user(commenter, 2),
                "author_association": association,
            },
            "sender": make_user(sender or commenter, 3),
            "repository": REPOSITORY,
            "installation": {"id": INSTALLATION_ID},
        }

    return build


@pytest.fixture
def pull_request_payload():
    """Builder for pull_request deliveries."""

    def build(
        action: str = "opened",
        number: int = 5,
        title: str = "Add feature",
        requested_reviewer: str | None = None,
        assignees: list[str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "action": action,
            "number": number,
            "pull_request": {
                "number": number,
                "title": title,
                "state": "open",
                "user": make_user("student"),
                "assignees": [make_user(login) for login in assignees or []],
            },
            "sender": make_user("student"),
            "repository": REPOSITORY,
            "installation": {"id": INSTALLATION_ID},
        }
        if requested_reviewer:
            payload["requested_reviewer"] = make_user(requested_reviewer, 10)
        return payload

    return build


@pytest.fixture
def branch_protection_rule_payload():
    """Builder for branch_protection_rule deliveries."""

    def build(action: str = "created", rule_name: str = "main", sender_type: str = "User") -> dict[str, Any]:
        return {
            "action": action,
            "rule": {"id": 21, "name": rule_name},
            "sender": make_user("admin", 4, sender_type),
            "repository": REPOSITORY,
            "installation": {"id": INSTALLATION_ID},
        }

    return build
