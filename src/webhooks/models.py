from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AuthorAssociation(str, Enum):
    """Relationship of a comment author to the repository."""

    COLLABORATOR = "COLLABORATOR"
    CONTRIBUTOR = "CONTRIBUTOR"
    FIRST_TIMER = "FIRST_TIMER"
    FIRST_TIME_CONTRIBUTOR = "FIRST_TIME_CONTRIBUTOR"
    MANNEQUIN = "MANNEQUIN"
    MEMBER = "MEMBER"
    NONE = "NONE"
    OWNER = "OWNER"


class PayloadModel(BaseModel):
    """Base for webhook payload fragments; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class User(PayloadModel):
    """GitHub user or bot account."""

    login: str = Field(..., description="GitHub username")
    id: int = Field(..., description="GitHub user ID")
    type: str = Field(default="User", description="Actor type: User, Bot, Organization")


class Repository(PayloadModel):
    """GitHub repository metadata from webhook payload."""

    id: int = Field(..., description="GitHub repository ID")
    name: str = Field(..., description="Repository name (without owner)")
    full_name: str = Field(..., description="Owner/repo format")
    private: bool = Field(default=False, description="Repository visibility")
    default_branch: str = Field(default="main", description="Default branch name")


class Installation(PayloadModel):
    """GitHub App installation the delivery belongs to."""

    id: int


class IssuePullRequestLink(PayloadModel):
    """Present on an issue only when the issue is a pull request."""

    url: str | None = None


class Issue(PayloadModel):
    number: int
    title: str
    state: str = "open"
    user: User | None = None
    pull_request: IssuePullRequestLink | None = None


class Comment(PayloadModel):
    id: int
    body: str = ""
    user: User
    author_association: AuthorAssociation = AuthorAssociation.NONE


class PullRequest(PayloadModel):
    number: int
    title: str
    state: str = "open"
    user: User | None = None
    assignees: list[User] = Field(default_factory=list)


class BranchProtectionRule(PayloadModel):
    """The rule a branch_protection_rule event refers to; ``name`` is the branch pattern."""

    id: int
    name: str


class GitHubEventModel(PayloadModel):
    """Standard GitHub webhook event payload structure."""

    action: str = Field(..., description="Event action type (e.g., 'opened', 'created')")
    sender: User = Field(..., description="User who triggered the event")
    repository: Repository = Field(..., description="Target repository")
    installation: Installation | None = Field(None, description="App installation, absent for repo webhooks")


class IssueCommentPayload(GitHubEventModel):
    issue: Issue
    comment: Comment


class PullRequestPayload(GitHubEventModel):
    number: int
    pull_request: PullRequest
    requested_reviewer: User | None = None


class BranchProtectionRulePayload(GitHubEventModel):
    rule: BranchProtectionRule


class WebhookResponse(BaseModel):
    """Serialized aggregate returned to the webhook caller."""

    status: str = Field(..., description="Processing status")
    event_type: str | None = Field(None, description="Value of the X-GitHub-Event header")
    messages: list[str] = Field(default_factory=list, description="One line per handler outcome")
    action_performed: bool = Field(False, description="Whether any handler changed state on GitHub")
