from functools import lru_cache

import structlog

from src.core.utils.logging import log_operation
from src.integrations.github import github_client_factory
from src.rules.loaders import github_settings_loader
from src.webhooks.handlers.base import HandlerDependencies
from src.webhooks.registry import HandlerMapping, build_default_registry
from src.webhooks.results import WebhookResult

logger = structlog.get_logger(__name__)


class WebhookDispatcher:
    """
    Routes a delivery to the handlers registered for its event key.
    """

    def __init__(self, registry: HandlerMapping, deps: HandlerDependencies):
        self._registry = registry
        self._deps = deps

    @property
    def event_keys(self) -> list[str]:
        return sorted(self._registry)

    async def process(self, event_key: str, raw_body: str, result: WebhookResult) -> None:
        """
        Runs every handler registered for ``event_key`` and records its outcome.

        Unregistered keys are not an error: the delivery is simply of no
        interest. Repository settings are loaded at most once per delivery and
        shared by all handlers. A handler that raises is reported in ``result``
        and does not stop the remaining handlers; a failure shared by several
        handlers, such as an unreadable settings file, is reported once.

        Args:
            event_key: Value of the X-GitHub-Event header.
            raw_body: The delivery body as received.
            result: Aggregate the outcome messages are appended to.
        """
        factories = self._registry.get(event_key)
        if not factories:
            logger.debug("event_not_subscribed", event_type=event_key)
            return

        deps = self._deps.for_delivery()
        reported: list[Exception] = []

        for factory in factories:
            handler_name = getattr(factory, "__name__", type(factory).__name__)
            try:
                handler = factory(deps)
                handler_name = handler.name
                async with log_operation("handle_event", event_type=event_key, handler=handler_name):
                    outcome = await handler.execute(raw_body)
            except Exception as e:
                if any(e is seen for seen in reported):
                    logger.info("handler_failure_already_reported", event_type=event_key, handler=handler_name)
                    continue
                logger.exception("handler_failed", event_type=event_key, handler=handler_name, error=str(e))
                result.log_error(handler_name, e)
                reported.append(e)
                continue

            logger.info(
                "handler_executed",
                event_type=event_key,
                handler=handler_name,
                outcome=outcome.outcome.value,
                description=outcome.description,
            )
            result.log_result(handler_name, outcome)


# Built lazily so tests can override the dependency before anything connects.
@lru_cache(maxsize=1)
def get_dispatcher() -> WebhookDispatcher:
    """Returns the shared WebhookDispatcher instance."""
    return WebhookDispatcher(
        build_default_registry(),
        HandlerDependencies(settings_provider=github_settings_loader, client_factory=github_client_factory),
    )
