from src.rules.models import RepositorySettings, ReviewerToAssigneeSettings
from src.webhooks.handlers.base import EventHandler, HandlerContext, HandlerDependencies, Policy, run_policy
from src.webhooks.models import PullRequestPayload
from src.webhooks.results import EventHandlerResult


class ReviewerToAssigneeHandler(EventHandler):
    """Makes a requested reviewer an assignee of the pull request."""

    def __init__(self, deps: HandlerDependencies):
        super().__init__(deps)
        self.policy = Policy(
            payload_model=PullRequestPayload,
            settings_block=self._settings_block,
            actions=frozenset({"review_requested"}),
            evaluate=self._evaluate,
        )

    async def execute(self, raw_body: str) -> EventHandlerResult:
        return await run_policy(raw_body, self.policy, self.deps)

    @staticmethod
    def _settings_block(settings: RepositorySettings) -> ReviewerToAssigneeSettings | None:
        return settings.reviewer_to_assignee

    async def _evaluate(
        self, context: HandlerContext[PullRequestPayload, ReviewerToAssigneeSettings]
    ) -> EventHandlerResult:
        pull_request = context.payload.pull_request
        reviewer = context.payload.requested_reviewer

        # Team review requests carry requested_team instead
        if reviewer is None:
            return EventHandlerResult.no_action_needed("no individual reviewer requested")

        if any(assignee.login.lower() == reviewer.login.lower() for assignee in pull_request.assignees):
            return EventHandlerResult.no_action_needed(f"reviewer {reviewer.login} is already an assignee")

        client = await context.github()
        await client.add_assignees(context.repo_full_name, pull_request.number, [reviewer.login])
        return EventHandlerResult.action_performed(
            f"assigned reviewer {reviewer.login} to pull request #{pull_request.number}"
        )
