from dataclasses import dataclass
from typing import Any, NoReturn

import aiohttp
import structlog

from src.core.errors import GitHubApiError

logger = structlog.get_logger(__name__)

# Merge endpoint statuses meaning "the PR could not be merged" rather than a failed call
_MERGE_REJECTED_STATUSES = {405, 409}


@dataclass(frozen=True)
class MergeResult:
    merged: bool
    message: str
    sha: str | None = None


@dataclass(frozen=True)
class BranchProtection:
    """Body of the branch protection update call."""

    required_status_checks: list[str]
    strict_status_checks: bool
    required_approving_review_count: int
    dismiss_stale_reviews: bool
    require_code_owner_reviews: bool
    enforce_admins: bool
    allow_force_pushes: bool
    allow_deletions: bool

    def to_request(self) -> dict[str, Any]:
        status_checks = None
        if self.required_status_checks:
            status_checks = {"strict": self.strict_status_checks, "contexts": list(self.required_status_checks)}

        reviews = None
        if self.required_approving_review_count > 0:
            reviews = {
                "dismiss_stale_reviews": self.dismiss_stale_reviews,
                "require_code_owner_reviews": self.require_code_owner_reviews,
                "required_approving_review_count": self.required_approving_review_count,
            }

        return {
            "required_status_checks": status_checks,
            "enforce_admins": self.enforce_admins,
            "required_pull_request_reviews": reviews,
            "restrictions": None,
            "allow_force_pushes": self.allow_force_pushes,
            "allow_deletions": self.allow_deletions,
        }


class GitHubClient:
    """
    GitHub REST client authenticated as one App installation.

    Mutating calls raise ``GitHubApiError`` on failure; nothing is retried.
    Instances are created by ``GitHubClientFactory`` and share its session.
    """

    def __init__(self, session: aiohttp.ClientSession, token: str, api_base_url: str = "https://api.github.com"):
        self._session = session
        self._base_url = api_base_url
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    async def merge_pull_request(self, repo: str, pr_number: int, commit_title: str) -> MergeResult:
        url = f"{self._base_url}/repos/{repo}/pulls/{pr_number}/merge"
        async with self._session.put(url, headers=self._headers, json={"commit_title": commit_title}) as response:
            if response.status == 200:
                data = await response.json()
                logger.info("pull_request_merged", repo=repo, pr_number=pr_number)
                return MergeResult(merged=bool(data.get("merged")), message=data.get("message", ""), sha=data.get("sha"))
            if response.status in _MERGE_REJECTED_STATUSES:
                data = await response.json()
                logger.warning("pull_request_not_mergeable", repo=repo, pr_number=pr_number, status=response.status)
                return MergeResult(merged=False, message=data.get("message", ""))
            await self._raise_for_status(response, "merge_pull_request", repo=repo, pr_number=pr_number)

    async def list_pull_requests(self, repo: str, state: str = "open") -> list[dict[str, Any]]:
        """
        List pull requests for a repository, following pagination.

        Args:
            repo: Full repo name (owner/repo)
            state: "open", "closed", or "all"
        """
        pulls: list[dict[str, Any]] = []
        page = 1
        while True:
            url = f"{self._base_url}/repos/{repo}/pulls?state={state}&per_page=100&page={page}"
            async with self._session.get(url, headers=self._headers) as response:
                if response.status != 200:
                    await self._raise_for_status(response, "list_pull_requests", repo=repo)
                batch = await response.json()
            pulls.extend(batch)
            if len(batch) < 100:
                break
            page += 1

        logger.info("pull_requests_listed", repo=repo, state=state, count=len(pulls))
        return pulls

    async def create_issue_comment(self, repo: str, issue_number: int, body: str) -> dict[str, Any]:
        """Create a comment on an issue or pull request."""
        url = f"{self._base_url}/repos/{repo}/issues/{issue_number}/comments"
        async with self._session.post(url, headers=self._headers, json={"body": body}) as response:
            if response.status != 201:
                await self._raise_for_status(response, "create_issue_comment", repo=repo, issue_number=issue_number)
            result = await response.json()

        logger.info("issue_comment_created", repo=repo, issue_number=issue_number)
        return result

    async def update_branch_protection(self, repo: str, branch: str, protection: BranchProtection) -> dict[str, Any]:
        url = f"{self._base_url}/repos/{repo}/branches/{branch}/protection"
        async with self._session.put(url, headers=self._headers, json=protection.to_request()) as response:
            if response.status != 200:
                await self._raise_for_status(response, "update_branch_protection", repo=repo, branch=branch)
            result = await response.json()

        logger.info("branch_protection_updated", repo=repo, branch=branch)
        return result

    async def add_assignees(self, repo: str, issue_number: int, assignees: list[str]) -> dict[str, Any]:
        url = f"{self._base_url}/repos/{repo}/issues/{issue_number}/assignees"
        async with self._session.post(url, headers=self._headers, json={"assignees": assignees}) as response:
            if response.status != 201:
                await self._raise_for_status(response, "add_assignees", repo=repo, issue_number=issue_number)
            result = await response.json()

        logger.info("assignees_added", repo=repo, issue_number=issue_number, assignees=assignees)
        return result

    async def get_file_content(self, repo: str, file_path: str) -> str | None:
        """
        Fetches the raw content of a file from the default branch, or None if it does not exist.
        """
        url = f"{self._base_url}/repos/{repo}/contents/{file_path}"
        headers = {**self._headers, "Accept": "application/vnd.github.raw"}
        async with self._session.get(url, headers=headers) as response:
            if response.status == 404:
                logger.info("file_not_found", repo=repo, file_path=file_path)
                return None
            if response.status != 200:
                await self._raise_for_status(response, "get_file_content", repo=repo, file_path=file_path)
            return await response.text()

    @staticmethod
    async def _raise_for_status(response: aiohttp.ClientResponse, operation: str, **context: Any) -> NoReturn:
        error_text = await response.text()
        logger.error("github_api_error", operation=operation, status=response.status, response=error_text, **context)
        raise GitHubApiError(response.status, error_text)
