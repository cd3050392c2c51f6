"""GitHub API client for pull request merge status, with retry logic."""

import asyncio
from typing import Any

import aiohttp

from pr_tracker.core.logging import get_logger
from pr_tracker.shared.exceptions import GitHubAPIError, PullRequestNotFoundError
from pr_tracker.shared.models import PullRequest

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub API client for one repository.

    Attributes:
        BASE_URL: GitHub API base URL
        MAX_RETRIES: Maximum number of retry attempts
        RETRY_DELAYS: Exponential backoff delays in seconds
    """

    BASE_URL = "https://api.github.com"
    MAX_RETRIES = 3
    RETRY_DELAYS = [2, 4, 8]

    def __init__(self, token: str, repo: str) -> None:
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            repo: Repository as "owner/name" (e.g. "NixOS/nixpkgs")
        """
        self.token = token
        self.repo = repo
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "GitHubClient":
        """Context manager entry: create aiohttp session."""
        self.session = aiohttp.ClientSession(
            headers={
                "Authorization": f"token {self.token}",
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": "pr-tracker",
            }
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Context manager exit: close aiohttp session."""
        if self.session:
            await self.session.close()

    async def get_pull_request(self, number: int) -> PullRequest:
        """Fetch a pull request and its merge status.

        Args:
            number: Pull request number

        Returns:
            PullRequest with base branch and merge status

        Raises:
            PullRequestNotFoundError: If the repository has no such pull request
            GitHubAPIError: If the API request fails or network error occurs
        """
        url = f"{self.BASE_URL}/repos/{self.repo}/pulls/{number}"

        for attempt in range(self.MAX_RETRIES):
            try:
                if not self.session:
                    raise GitHubAPIError("Session not initialized")

                async with self.session.get(url) as response:
                    if response.status == 200:
                        data: dict[str, Any] = await response.json()
                        return PullRequest.from_github_payload(data)
                    elif response.status == 404:
                        logger.info("github.pull.not_found", repo=self.repo, number=number)
                        raise PullRequestNotFoundError(f"No pull request #{number} in {self.repo}")
                    elif response.status in (403, 429):
                        remaining = response.headers.get("x-ratelimit-remaining")
                        reset = response.headers.get("x-ratelimit-reset")
                        if response.status == 403 and remaining != "0":
                            raise GitHubAPIError(f"Forbidden: {response.status}")
                        logger.warning(
                            "github.ratelimit",
                            remaining=remaining,
                            reset=reset,
                            status=response.status,
                        )
                        raise GitHubAPIError(f"Rate limited: {response.status}")
                    elif response.status == 401:
                        raise GitHubAPIError(f"Invalid token: {response.status}")
                    else:
                        raise GitHubAPIError(f"API error: {response.status}")
            except aiohttp.ClientError as e:
                if attempt < self.MAX_RETRIES - 1:
                    logger.warning(
                        "github.pull.retry",
                        attempt=attempt + 1,
                        error=str(e),
                        number=number,
                    )
                    await asyncio.sleep(self.RETRY_DELAYS[attempt])
                else:
                    raise GitHubAPIError(f"Network error: {e}") from e

        raise GitHubAPIError(f"Failed to fetch pull request #{number} after retries")
