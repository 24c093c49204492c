from enum import Enum


class EventType(Enum):
    """GitHub event types the monitor subscribes to."""

    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"
    BRANCH_PROTECTION_RULE = "branch_protection_rule"
    # Add other event types here as we support them
