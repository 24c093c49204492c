import structlog

from src.integrations.github import BranchProtection
from src.rules.models import BranchProtectionSettings, RepositorySettings
from src.webhooks.handlers.base import EventHandler, HandlerContext, HandlerDependencies, Policy, run_policy
from src.webhooks.models import BranchProtectionRulePayload
from src.webhooks.results import EventHandlerResult

logger = structlog.get_logger(__name__)

# Characters that make a rule name a pattern rather than a single branch
_PATTERN_CHARS = set("*?[]")


def protection_from_settings(settings: BranchProtectionSettings) -> BranchProtection:
    return BranchProtection(
        required_status_checks=list(settings.required_status_checks),
        strict_status_checks=settings.strict_status_checks,
        required_approving_review_count=settings.required_approving_review_count,
        dismiss_stale_reviews=settings.dismiss_stale_reviews,
        require_code_owner_reviews=settings.require_code_owner_reviews,
        enforce_admins=settings.enforce_admins,
        allow_force_pushes=settings.allow_force_pushes,
        allow_deletions=settings.allow_deletions,
    )


class BranchProtectionRuleHandler(EventHandler):
    """Replaces a newly created branch protection rule with the configured ruleset."""

    def __init__(self, deps: HandlerDependencies):
        super().__init__(deps)
        self.policy = Policy(
            payload_model=BranchProtectionRulePayload,
            settings_block=self._settings_block,
            actions=frozenset({"created"}),
            evaluate=self._evaluate,
        )

    async def execute(self, raw_body: str) -> EventHandlerResult:
        return await run_policy(raw_body, self.policy, self.deps)

    @staticmethod
    def _settings_block(settings: RepositorySettings) -> BranchProtectionSettings | None:
        return settings.branch_protection

    async def _evaluate(
        self, context: HandlerContext[BranchProtectionRulePayload, BranchProtectionSettings]
    ) -> EventHandlerResult:
        payload = context.payload

        # Our own update shows up as a rule created by the App's bot account
        if payload.sender.type == "Bot":
            return EventHandlerResult.no_action_needed(f"rule created by bot {payload.sender.login}")

        branch = payload.rule.name
        if _PATTERN_CHARS & set(branch):
            return EventHandlerResult.no_action_needed(f"rule pattern {branch} does not name a single branch")

        client = await context.github()
        await client.update_branch_protection(
            context.repo_full_name, branch, protection_from_settings(context.policy_settings)
        )
        logger.info("branch_protection_applied", repo=context.repo_full_name, branch=branch)
        return EventHandlerResult.action_performed("branch protection rule applied")
