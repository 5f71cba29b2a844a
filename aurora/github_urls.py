"""
github_urls.py

Responsibility: turn user-supplied GitHub URLs into structured references.

Both parsers are exact matches: a URL with path segments beyond the expected
shape (e.g. `/tree/main` after a repository) is rejected rather than truncated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from aurora.errors import InvalidFormat, InvalidNumber

DEFAULT_HOST = "github.com"


@dataclass(frozen=True)
class PullRequestRef:
    owner: str
    repo: str
    number: int


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    repo: str
    host: str = DEFAULT_HOST

    @property
    def clone_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}.git"


@lru_cache(maxsize=None)
def _pr_pattern(host: str) -> re.Pattern[str]:
    return re.compile(rf"https?://{re.escape(host)}/([^/]+)/([^/]+)/pull/([0-9]+)/?")


@lru_cache(maxsize=None)
def _repo_pattern(host: str) -> re.Pattern[str]:
    return re.compile(rf"https?://{re.escape(host)}/([^/]+)/([^/]+)/?")


def parse_pull_request_url(url: str, host: str = DEFAULT_HOST) -> PullRequestRef:
    """
    Parse `https://<host>/<owner>/<repo>/pull/<number>` (trailing slash allowed).
    """
    m = _pr_pattern(host).fullmatch(url)
    if m is None:
        raise InvalidFormat(
            f"invalid GitHub PR URL: {url}\nExpected format: https://{host}/owner/repo/pull/123"
        )

    try:
        number = int(m.group(3))
    except ValueError as e:
        raise InvalidNumber(f"invalid PR number: {m.group(3)}") from e
    if number <= 0:
        raise InvalidNumber(f"invalid PR number: {m.group(3)}")

    return PullRequestRef(owner=m.group(1), repo=m.group(2), number=number)


def parse_repository_url(url: str, host: str = DEFAULT_HOST) -> RepositoryRef:
    """
    Parse `https://<host>/<owner>/<repo>` (trailing slash allowed).
    """
    m = _repo_pattern(host).fullmatch(url)
    if m is None:
        raise InvalidFormat(
            f"invalid GitHub repository URL: {url}\nExpected format: https://{host}/owner/repo"
        )
    return RepositoryRef(owner=m.group(1), repo=m.group(2), host=host)
