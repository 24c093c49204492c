"""
Handler outcomes and the per-delivery result aggregate.
"""

import threading
from dataclasses import dataclass
from enum import Enum

from src.webhooks.models import WebhookResponse


class Outcome(str, Enum):
    """Closed set of handler outcomes; values are the words used in messages."""

    DISABLED = "disabled"
    EVENT_NOT_OF_INTEREST = "event not of interest"
    NO_ACTION_NEEDED = "no action needed"
    ACTION_PERFORMED = "action performed"
    PAYLOAD_ERROR = "payload error"


@dataclass(frozen=True)
class EventHandlerResult:
    """Outcome of one handler invocation."""

    outcome: Outcome
    description: str

    @classmethod
    def disabled(cls) -> "EventHandlerResult":
        return cls(Outcome.DISABLED, "not enabled for repository")

    @classmethod
    def event_not_of_interest(cls, action: str) -> "EventHandlerResult":
        return cls(Outcome.EVENT_NOT_OF_INTEREST, f"action {action} is not of interest")

    @classmethod
    def no_action_needed(cls, reason: str) -> "EventHandlerResult":
        return cls(Outcome.NO_ACTION_NEEDED, reason)

    @classmethod
    def action_performed(cls, description: str) -> "EventHandlerResult":
        return cls(Outcome.ACTION_PERFORMED, description)

    @classmethod
    def payload_error(cls, reason: str) -> "EventHandlerResult":
        return cls(Outcome.PAYLOAD_ERROR, reason)

    def format(self, handler_name: str) -> str:
        return f"{handler_name} -> {self.outcome.value}: {self.description}"


class WebhookResult:
    """
    Messages collected while processing one delivery.

    Appends are serialized with a lock so handlers may share one instance.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: list[str] = []
        self._action_performed = False

    @property
    def messages(self) -> list[str]:
        with self._lock:
            return list(self._messages)

    @property
    def action_performed(self) -> bool:
        return self._action_performed

    def log_result(self, handler_name: str, result: EventHandlerResult) -> None:
        with self._lock:
            self._messages.append(result.format(handler_name))
            if result.outcome is Outcome.ACTION_PERFORMED:
                self._action_performed = True

    def log_error(self, handler_name: str, error: Exception) -> None:
        with self._lock:
            self._messages.append(f"{handler_name} -> exception: {error}")

    def to_response(self, event_type: str | None = None) -> WebhookResponse:
        with self._lock:
            return WebhookResponse(
                status="ok",
                event_type=event_type,
                messages=list(self._messages),
                action_performed=self._action_performed,
            )
