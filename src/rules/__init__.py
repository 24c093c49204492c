# Repository settings package

from src.rules.models import (
    BranchProtectionSettings,
    CommentProtectionSettings,
    MultiplePRProtectionSettings,
    PolicySettings,
    PullRequestCommentCommandSettings,
    RepositorySettings,
    ReviewerToAssigneeSettings,
)

__all__ = [
    "BranchProtectionSettings",
    "CommentProtectionSettings",
    "MultiplePRProtectionSettings",
    "PolicySettings",
    "PullRequestCommentCommandSettings",
    "RepositorySettings",
    "ReviewerToAssigneeSettings",
]
