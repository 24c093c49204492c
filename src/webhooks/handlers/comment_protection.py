import structlog

from src.rules.models import CommentProtectionSettings, RepositorySettings
from src.webhooks.handlers.base import EventHandler, HandlerContext, HandlerDependencies, Policy, run_policy
from src.webhooks.models import IssueCommentPayload
from src.webhooks.results import EventHandlerResult

logger = structlog.get_logger(__name__)


class IssueCommentEditDeleteHandler(EventHandler):
    """Posts a warning when someone edits or deletes a comment written by another user."""

    def __init__(self, deps: HandlerDependencies):
        super().__init__(deps)
        self.policy = Policy(
            payload_model=IssueCommentPayload,
            settings_block=self._settings_block,
            actions=frozenset({"edited", "deleted"}),
            evaluate=self._evaluate,
        )

    async def execute(self, raw_body: str) -> EventHandlerResult:
        return await run_policy(raw_body, self.policy, self.deps)

    @staticmethod
    def _settings_block(settings: RepositorySettings) -> CommentProtectionSettings | None:
        return settings.comment_protection

    async def _evaluate(
        self, context: HandlerContext[IssueCommentPayload, CommentProtectionSettings]
    ) -> EventHandlerResult:
        payload = context.payload
        actor = payload.sender.login
        author = payload.comment.user.login

        if actor.lower() == author.lower():
            return EventHandlerResult.no_action_needed("comment action ok")

        action = payload.action.lower()
        logger.info("foreign_comment_changed", repo=context.repo_full_name, actor=actor, author=author, action=action)

        client = await context.github()
        await client.create_issue_comment(
            context.repo_full_name,
            payload.issue.number,
            f"{context.policy_settings.warning_text}\n\n@{actor} {action} a comment written by @{author}.",
        )
        return EventHandlerResult.action_performed("comment action resulting in warning")
