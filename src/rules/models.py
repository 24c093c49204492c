"""
Per-repository policy settings, read from the repository's monitor file.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SettingsModel(BaseModel):
    """Settings are immutable snapshots; YAML keys may be camelCase or snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class PolicySettings(SettingsModel):
    """Common shape of a policy block."""

    enabled: bool = False


class BranchProtectionSettings(PolicySettings):
    required_status_checks: list[str] = Field(default_factory=list)
    strict_status_checks: bool = True
    required_approving_review_count: int = Field(default=1, ge=0, le=6)
    dismiss_stale_reviews: bool = False
    require_code_owner_reviews: bool = False
    enforce_admins: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False


class CommentProtectionSettings(PolicySettings):
    warning_text: str = ":warning: Editing or deleting another user's comment is not allowed."


class MultiplePRProtectionSettings(PolicySettings):
    warning_text: str = (
        ":exclamation: There are multiple open pull requests in this repository. "
        "Please close all but one; only the earliest one will be considered."
    )


class ReviewerToAssigneeSettings(PolicySettings):
    pass


class PullRequestCommentCommandSettings(PolicySettings):
    pass


class RepositorySettings(SettingsModel):
    """Policy configuration of one repository."""

    enabled: bool = False
    branch_protection: BranchProtectionSettings | None = Field(default_factory=BranchProtectionSettings)
    comment_protection: CommentProtectionSettings | None = Field(default_factory=CommentProtectionSettings)
    multiple_pr_protection: MultiplePRProtectionSettings | None = Field(
        default_factory=MultiplePRProtectionSettings, alias="multiplePRProtection"
    )
    reviewer_to_assignee: ReviewerToAssigneeSettings | None = Field(default_factory=ReviewerToAssigneeSettings)
    pull_request_comment_command: PullRequestCommentCommandSettings | None = Field(
        default_factory=PullRequestCommentCommandSettings
    )
