import json
from unittest.mock import AsyncMock

import pytest

from src.webhooks.handlers.comment_protection import IssueCommentEditDeleteHandler
from src.webhooks.results import EventHandlerResult, Outcome


@pytest.fixture
def handler(deps) -> IssueCommentEditDeleteHandler:
    return IssueCommentEditDeleteHandler(deps)


class TestIssueCommentEditDeleteHandler:
    """Test warnings on edits and deletions of other users' comments."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["edited", "deleted"])
    async def test_self_edit_is_allowed(
        self, handler: IssueCommentEditDeleteHandler, github_client: AsyncMock, issue_comment_payload, action: str
    ) -> None:
        payload = issue_comment_payload(action=action, body="typo fixed", commenter="alice", sender="Alice")

        result = await handler.execute(json.dumps(payload))

        assert result == EventHandlerResult.no_action_needed("comment action ok")
        github_client.create_issue_comment.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["edited", "deleted"])
    async def test_foreign_edit_is_warned(
        self, handler: IssueCommentEditDeleteHandler, github_client: AsyncMock, issue_comment_payload, action: str
    ) -> None:
        payload = issue_comment_payload(action=action, body="hello", commenter="alice", sender="bob", issue_number=3)

        result = await handler.execute(json.dumps(payload))

        assert result == EventHandlerResult.action_performed("comment action resulting in warning")
        repo, number, body = github_client.create_issue_comment.await_args.args
        assert (repo, number) == ("octocat/hello-world", 3)
        assert body.startswith("Do not touch other people's comments.")
        assert "@bob" in body and "@alice" in body

    @pytest.mark.asyncio
    async def test_created_is_not_of_interest(
        self, handler: IssueCommentEditDeleteHandler, issue_comment_payload
    ) -> None:
        result = await handler.execute(json.dumps(issue_comment_payload(action="created", sender="bob")))

        assert result.outcome is Outcome.EVENT_NOT_OF_INTEREST
