"""Minimal GitHub REST client for pull request discovery and comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class PullRequest:
    """Open pull request associated with a commit."""

    number: int
    base_ref: str
    state: str = "open"


class GitHubClient:
    """Async GitHub client authenticated with a workflow token.

    Use as an async context manager so the underlying connection pool is
    closed when the run ends.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def find_open_pull_requests(
        self,
        owner: str,
        repo: str,
        commit_sha: str,
        *,
        base_branch: str = "main",
    ) -> list[PullRequest]:
        """List open pull requests into ``base_branch`` that contain a commit.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
            ValueError: If the response is not a list of pull requests
        """
        response = await self._client.get(f"/repos/{owner}/{repo}/commits/{commit_sha}/pulls")
        response.raise_for_status()

        try:
            pulls = [_pull_request_from_payload(item) for item in response.json()]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"unexpected pull request payload: {exc}") from exc
        matching = [pr for pr in pulls if pr.state == "open" and pr.base_ref == base_branch]
        logger.info(
            "%d PRs open to %s: %s",
            len(matching),
            base_branch,
            ", ".join(f"#{pr.number}" for pr in matching) or "none",
        )
        return matching

    async def create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> bool:
        """Post a comment on an issue or pull request.

        Failures are logged and reported as False rather than raised.
        """
        try:
            response = await self._client.post(
                f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
                json={"body": body},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Error attempting to comment on PR #%d: %s", issue_number, exc)
            return False

        comment_url = _comment_url(response)
        logger.info("Comment created on PR #%d: %s", issue_number, comment_url)
        return True


def _pull_request_from_payload(item: dict[str, Any]) -> PullRequest:
    return PullRequest(
        number=int(item["number"]),
        base_ref=str(item.get("base", {}).get("ref", "")),
        state=str(item.get("state", "")),
    )


def _comment_url(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        return payload.get("html_url")
    return None
