"""
Event-type key to handler wiring.

The registry is assembled once at composition time and frozen; after that it
is a read-only mapping shared by all deliveries.
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType

import structlog

from src.core.models import EventType
from src.webhooks.handlers.base import EventHandler, HandlerDependencies
from src.webhooks.handlers.branch_protection import BranchProtectionRuleHandler
from src.webhooks.handlers.comment_command import PullRequestCommentCommandHandler
from src.webhooks.handlers.comment_protection import IssueCommentEditDeleteHandler
from src.webhooks.handlers.duplicate_pr import PullRequestOpenDuplicateHandler
from src.webhooks.handlers.reviewer_to_assignee import ReviewerToAssigneeHandler

logger = structlog.get_logger(__name__)

HandlerFactory = Callable[[HandlerDependencies], EventHandler]
HandlerMapping = Mapping[str, tuple[HandlerFactory, ...]]


class EventHandlerRegistry:
    """Collects handler factories per event key until frozen."""

    def __init__(self) -> None:
        self._factories: dict[str, list[HandlerFactory]] = {}
        self._frozen = False

    def register(self, event_key: str | EventType, factory: HandlerFactory) -> "EventHandlerRegistry":
        """
        Registers a handler factory for an event key.

        Several factories may share a key; they run in registration order.

        Args:
            event_key: Value of the X-GitHub-Event header (or its EventType).
            factory: Callable building the handler from its dependencies,
                usually the handler class itself.
        """
        if self._frozen:
            raise RuntimeError("Handler registry is frozen; register handlers before building the dispatcher.")
        key = event_key.value if isinstance(event_key, EventType) else event_key
        self._factories.setdefault(key, []).append(factory)
        logger.info("handler_registered", event_type=key, handler=getattr(factory, "__name__", repr(factory)))
        return self

    def freeze(self) -> HandlerMapping:
        self._frozen = True
        return MappingProxyType({key: tuple(factories) for key, factories in self._factories.items()})


def build_default_registry() -> HandlerMapping:
    """The monitor's production wiring."""
    return (
        EventHandlerRegistry()
        .register(EventType.BRANCH_PROTECTION_RULE, BranchProtectionRuleHandler)
        .register(EventType.ISSUE_COMMENT, IssueCommentEditDeleteHandler)
        .register(EventType.ISSUE_COMMENT, PullRequestCommentCommandHandler)
        .register(EventType.PULL_REQUEST, PullRequestOpenDuplicateHandler)
        .register(EventType.PULL_REQUEST, ReviewerToAssigneeHandler)
        .freeze()
    )
