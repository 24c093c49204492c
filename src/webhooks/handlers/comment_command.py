from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from src.rules.models import PullRequestCommentCommandSettings, RepositorySettings
from src.webhooks.handlers.base import EventHandler, HandlerContext, HandlerDependencies, Policy, run_policy
from src.webhooks.models import AuthorAssociation, IssueCommentPayload
from src.webhooks.results import EventHandlerResult

logger = structlog.get_logger(__name__)

CommentContext = HandlerContext[IssueCommentPayload, PullRequestCommentCommandSettings]

COMMAND_PREFIX = "+"


@dataclass(frozen=True)
class CommandHandler:
    """Permission check and execution of one ``+command``."""

    check_permission: Callable[[CommentContext], Awaitable[bool]]
    execute: Callable[[str, CommentContext], Awaitable[EventHandlerResult]]


async def _ok_permission_check(context: CommentContext) -> bool:
    return context.payload.comment.author_association is AuthorAssociation.COLLABORATOR


async def _ok_execute(contents: str, context: CommentContext) -> EventHandlerResult:
    issue = context.payload.issue
    client = await context.github()
    merge = await client.merge_pull_request(
        context.repo_full_name,
        issue.number,
        commit_title=f"merged PR via +ok: #{issue.number} {issue.title}",
    )
    if merge.merged:
        return EventHandlerResult.action_performed(f"merged pull request #{issue.number} {issue.title}")
    return EventHandlerResult.payload_error(f"failed to merge pull request #{issue.number} {issue.title}")


COMMANDS: Mapping[str, CommandHandler] = MappingProxyType(
    {
        "ok": CommandHandler(check_permission=_ok_permission_check, execute=_ok_execute),
    }
)


def parse_command(contents: str) -> str | None:
    """
    Return the command keyword of a ``+command`` comment, or None if the comment is not one.

    The keyword runs from after the ``+`` up to the first space.
    """
    if not contents.startswith(COMMAND_PREFIX):
        return None
    end_of_word = contents.find(" ")
    return contents[1:end_of_word] if end_of_word >= 0 else contents[1:]


class PullRequestCommentCommandHandler(EventHandler):
    """Runs ``+command`` comments posted on pull requests, e.g. ``+ok`` to merge."""

    def __init__(self, deps: HandlerDependencies, commands: Mapping[str, CommandHandler] = COMMANDS):
        super().__init__(deps)
        self.commands = commands
        self.policy = Policy(
            payload_model=IssueCommentPayload,
            settings_block=self._settings_block,
            actions=frozenset({"created"}),
            evaluate=self._evaluate,
        )

    async def execute(self, raw_body: str) -> EventHandlerResult:
        return await run_policy(raw_body, self.policy, self.deps)

    @staticmethod
    def _settings_block(settings: RepositorySettings) -> PullRequestCommentCommandSettings | None:
        return settings.pull_request_comment_command

    async def _evaluate(self, context: CommentContext) -> EventHandlerResult:
        payload = context.payload
        contents = payload.comment.body.strip()

        command = parse_command(contents)
        if command is None:
            return EventHandlerResult.no_action_needed("comment is not a command")

        handler = self.commands.get(command)
        if handler is None:
            return EventHandlerResult.no_action_needed(f"invalid command: +{command}")

        if payload.issue.pull_request is None:
            return EventHandlerResult.no_action_needed("comment is not on a pull request")

        if not await handler.check_permission(context):
            logger.warning(
                "comment_command_denied",
                repo=context.repo_full_name,
                user=payload.comment.user.login,
                command=command,
            )
            return EventHandlerResult.payload_error(
                f"{payload.comment.user.login} is not allowed to execute the command: {contents}"
            )

        logger.info("comment_command_executing", repo=context.repo_full_name, command=command)
        return await handler.execute(contents, context)
