"""
github_client.py

Responsibility: look up a pull request's head (fork clone URL and branch).

Everything that knows the GitHub REST API lives here: the endpoint layout, the
headers and how status codes map to aurora errors. The API base comes from
`Settings.api_base`, so a GitHub Enterprise instance works the same way.

Requests are anonymous, so they are subject to GitHub's unauthenticated rate
limit. There are no retries: one PR lookup is one request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from aurora.errors import DecodeError, ForkUnavailable, NotFound, RateLimited, RemoteError
from aurora.log import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class PullRequestMetadata:
    fork_clone_url: str
    branch: str
    title: str
    state: str


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class GitHubClient:
    def __init__(
        self,
        api_base: str = "https://api.github.com",
        *,
        user_agent: str = "aurora-cli",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self._user_agent,
        }

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestMetadata:
        """
        Fetch the head (fork clone URL + branch) of a pull request.
        """
        url = f"{self._api_base}/repos/{owner}/{repo}/pulls/{number}"
        log.debug("GET %s", url)
        try:
            r = self._session.get(url, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as e:
            raise RemoteError(f"failed to fetch PR #{number} from {owner}/{repo}: {e}") from e
        log.debug("GET %s -> %s", url, r.status_code)

        if r.status_code == 404:
            raise NotFound(f"PR #{number} not found in {owner}/{repo}")
        if r.status_code == 403:
            raise RateLimited("GitHub API rate limit exceeded. Try again later or use --repo/--branch flags")
        if r.status_code != 200:
            raise RemoteError(f"GitHub API error: {r.status_code} {r.reason or ''}".rstrip())

        try:
            data = r.json()
        except ValueError as e:
            raise DecodeError(f"failed to parse GitHub response for PR #{number}") from e
        if not isinstance(data, dict):
            raise DecodeError(f"unexpected GitHub response for PR #{number}: expected a JSON object")

        head = _as_dict(data.get("head"))
        clone_url = str(_as_dict(head.get("repo")).get("clone_url") or "")
        if not clone_url:
            raise ForkUnavailable("PR fork repository not available (may have been deleted)")

        return PullRequestMetadata(
            fork_clone_url=clone_url,
            branch=str(head.get("ref") or ""),
            title=str(data.get("title") or ""),
            state=str(data.get("state") or ""),
        )
