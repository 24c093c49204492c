from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

import structlog
from pydantic import ValidationError

from src.core.errors import GitHubApiError
from src.integrations.github import GitHubClient, GitHubClientFactory
from src.rules.interface import RepositorySettingsProvider
from src.rules.loaders.delivery_cache import DeliverySettingsCache
from src.rules.models import PolicySettings, RepositorySettings
from src.webhooks.models import GitHubEventModel
from src.webhooks.results import EventHandlerResult

logger = structlog.get_logger(__name__)

P = TypeVar("P", bound=GitHubEventModel)
S = TypeVar("S", bound=PolicySettings)


@dataclass(frozen=True)
class HandlerDependencies:
    """Collaborators injected into every handler by the dispatcher."""

    settings_provider: RepositorySettingsProvider
    client_factory: GitHubClientFactory

    def for_delivery(self) -> "HandlerDependencies":
        """Copy whose settings provider loads each repository at most once."""
        return replace(self, settings_provider=DeliverySettingsCache(self.settings_provider))


class HandlerContext(Generic[P, S]):
    """
    What a policy sees once the ladder has admitted the event.

    The GitHub client is created on first use, so policies that decide
    "no action needed" never authenticate.
    """

    def __init__(
        self,
        payload: P,
        installation_id: int,
        settings: RepositorySettings,
        policy_settings: S,
        deps: HandlerDependencies,
    ):
        self.payload = payload
        self.installation_id = installation_id
        self.settings = settings
        self.policy_settings = policy_settings
        self._deps = deps
        self._client: GitHubClient | None = None

    @property
    def repo_full_name(self) -> str:
        return self.payload.repository.full_name

    async def github(self) -> GitHubClient:
        if self._client is None:
            self._client = await self._deps.client_factory.create(self.installation_id)
        return self._client


@dataclass(frozen=True)
class Policy(Generic[P, S]):
    """
    Everything that distinguishes one handler's ladder from another's.

    Attributes:
        payload_model: Pydantic model the raw body is parsed into.
        settings_block: Selects the handler's block from the repository settings.
        actions: Event actions the handler reacts to (lower case).
        evaluate: Business predicates, permission checks and the mutating call.
    """

    payload_model: type[P]
    settings_block: Callable[[RepositorySettings], S | None]
    actions: frozenset[str]
    evaluate: Callable[[HandlerContext[P, S]], Awaitable[EventHandlerResult]]


async def run_policy(raw_body: str, policy: Policy[P, S], deps: HandlerDependencies) -> EventHandlerResult:
    """
    Apply the shared decision ladder to one delivery.

    Order: parse payload, load repository settings, check the repository and
    policy switches, filter on action, then let the policy decide. GitHub API
    failures raised while the policy acts are reported as payload errors; any
    other exception propagates to the dispatcher.
    """
    try:
        payload = policy.payload_model.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning("payload_invalid", model=policy.payload_model.__name__, errors=e.error_count())
        return EventHandlerResult.payload_error(f"invalid {policy.payload_model.__name__}: {e.errors()[0]['msg']}")

    if payload.installation is None:
        return EventHandlerResult.payload_error("no installation information in webhook payload")

    settings = await deps.settings_provider.load(payload.repository.full_name, payload.installation.id)
    if settings is None or not settings.enabled:
        return EventHandlerResult.disabled()

    policy_settings = policy.settings_block(settings)
    if policy_settings is None or not policy_settings.enabled:
        return EventHandlerResult.disabled()

    if payload.action.lower() not in policy.actions:
        return EventHandlerResult.event_not_of_interest(payload.action)

    context = HandlerContext(payload, payload.installation.id, settings, policy_settings, deps)
    try:
        return await policy.evaluate(context)
    except GitHubApiError as e:
        logger.warning("github_call_failed", repo=payload.repository.full_name, status=e.status)
        return EventHandlerResult.payload_error(str(e))


class EventHandler(ABC):
    """
    Abstract base class for all webhook event handlers.

    A handler receives the raw delivery body and reports one EventHandlerResult.
    Expected outcomes are returned, never raised.
    """

    def __init__(self, deps: HandlerDependencies):
        self.deps = deps

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def execute(self, raw_body: str) -> EventHandlerResult:
        """
        Process the incoming webhook body.

        Args:
            raw_body: The JSON body exactly as delivered.

        Returns:
            The outcome of applying this handler's policy.
        """
        pass
