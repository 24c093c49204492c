import json
from unittest.mock import AsyncMock

import pytest

from src.webhooks.handlers.duplicate_pr import PullRequestOpenDuplicateHandler
from src.webhooks.results import Outcome


@pytest.fixture
def handler(deps) -> PullRequestOpenDuplicateHandler:
    return PullRequestOpenDuplicateHandler(deps)


def open_pulls(*numbers: int) -> list[dict]:
    return [{"number": number, "state": "open"} for number in numbers]


class TestPullRequestOpenDuplicateHandler:
    """Test duplicate pull request warnings."""

    @pytest.mark.asyncio
    async def test_sole_open_pull_request(
        self, handler: PullRequestOpenDuplicateHandler, github_client: AsyncMock, pull_request_payload
    ) -> None:
        github_client.list_pull_requests.return_value = open_pulls(5)

        result = await handler.execute(json.dumps(pull_request_payload(number=5)))

        assert result.format(handler.name) == (
            "PullRequestOpenDuplicateHandler -> no action needed: pull request open is ok, there are no other PRs"
        )
        github_client.list_pull_requests.assert_awaited_once_with("octocat/hello-world", state="open")
        github_client.create_issue_comment.assert_not_called()

    @pytest.mark.asyncio
    async def test_listing_without_new_pull_request(
        self, handler: PullRequestOpenDuplicateHandler, github_client: AsyncMock, pull_request_payload
    ) -> None:
        github_client.list_pull_requests.return_value = []

        result = await handler.execute(json.dumps(pull_request_payload(number=5)))

        assert result.outcome is Outcome.NO_ACTION_NEEDED

    @pytest.mark.asyncio
    async def test_duplicates_warned_except_lowest(
        self, handler: PullRequestOpenDuplicateHandler, github_client: AsyncMock, pull_request_payload
    ) -> None:
        github_client.list_pull_requests.return_value = open_pulls(12, 3, 8)

        result = await handler.execute(json.dumps(pull_request_payload(number=12)))

        assert result.outcome is Outcome.ACTION_PERFORMED
        warned = [call.args[1] for call in github_client.create_issue_comment.await_args_list]
        assert sorted(warned) == [8, 12]
        for call in github_client.create_issue_comment.await_args_list:
            assert call.args[0] == "octocat/hello-world"
            assert call.args[2] == "Duplicate pull request."

    @pytest.mark.asyncio
    async def test_new_pull_request_is_canonical_when_lowest(
        self, handler: PullRequestOpenDuplicateHandler, github_client: AsyncMock, pull_request_payload
    ) -> None:
        # The open listing can lag behind the PR that triggered the event
        github_client.list_pull_requests.return_value = open_pulls(9)

        result = await handler.execute(json.dumps(pull_request_payload(number=2)))

        assert result.outcome is Outcome.ACTION_PERFORMED
        github_client.create_issue_comment.assert_awaited_once_with("octocat/hello-world", 9, "Duplicate pull request.")

    @pytest.mark.asyncio
    async def test_only_opened_is_of_interest(
        self, handler: PullRequestOpenDuplicateHandler, github_client: AsyncMock, pull_request_payload
    ) -> None:
        result = await handler.execute(json.dumps(pull_request_payload(action="synchronize")))

        assert result.outcome is Outcome.EVENT_NOT_OF_INTEREST
        github_client.list_pull_requests.assert_not_called()
