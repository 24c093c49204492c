import structlog

from src.rules.models import MultiplePRProtectionSettings, RepositorySettings
from src.webhooks.handlers.base import EventHandler, HandlerContext, HandlerDependencies, Policy, run_policy
from src.webhooks.models import PullRequestPayload
from src.webhooks.results import EventHandlerResult

logger = structlog.get_logger(__name__)


class PullRequestOpenDuplicateHandler(EventHandler):
    """
    Warns about duplicate pull requests when a new one is opened.

    The lowest-numbered open pull request is the canonical one and is never
    warned; every other open pull request gets one warning comment.
    """

    def __init__(self, deps: HandlerDependencies):
        super().__init__(deps)
        self.policy = Policy(
            payload_model=PullRequestPayload,
            settings_block=self._settings_block,
            actions=frozenset({"opened"}),
            evaluate=self._evaluate,
        )

    async def execute(self, raw_body: str) -> EventHandlerResult:
        return await run_policy(raw_body, self.policy, self.deps)

    @staticmethod
    def _settings_block(settings: RepositorySettings) -> MultiplePRProtectionSettings | None:
        return settings.multiple_pr_protection

    async def _evaluate(
        self, context: HandlerContext[PullRequestPayload, MultiplePRProtectionSettings]
    ) -> EventHandlerResult:
        client = await context.github()
        open_pulls = await client.list_pull_requests(context.repo_full_name, state="open")

        # The listing may not include the PR that triggered this event yet
        numbers = {pull["number"] for pull in open_pulls}
        numbers.add(context.payload.pull_request.number)

        if len(numbers) <= 1:
            return EventHandlerResult.no_action_needed("pull request open is ok, there are no other PRs")

        canonical, *duplicates = sorted(numbers)
        logger.info(
            "duplicate_pull_requests_found",
            repo=context.repo_full_name,
            canonical=canonical,
            duplicates=duplicates,
        )

        for number in duplicates:
            await client.create_issue_comment(context.repo_full_name, number, context.policy_settings.warning_text)

        return EventHandlerResult.action_performed(
            f"pull request open is not ok, there are {len(numbers)} open PRs, warned {len(duplicates)} duplicates"
        )
