from __future__ import annotations

from typing import Any

import pytest
import requests

from aurora.errors import DecodeError, ForkUnavailable, NotFound, RateLimited, RemoteError
from aurora.github_client import GitHubClient, PullRequestMetadata

_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = _NO_JSON, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _pr_payload(clone_url: str | None = "https://github.com/alice/lnd.git") -> dict[str, Any]:
    repo = None if clone_url is None else {"clone_url": clone_url}
    return {
        "title": "routing: fix fee calc",
        "state": "open",
        "head": {"ref": "fix-fees", "repo": repo},
    }


def test_get_pull_request() -> None:
    session = FakeSession(FakeResponse(200, _pr_payload()))
    client = GitHubClient(session=session)

    pr = client.get_pull_request("lightningnetwork", "lnd", 1234)

    assert pr == PullRequestMetadata(
        fork_clone_url="https://github.com/alice/lnd.git",
        branch="fix-fees",
        title="routing: fix fee calc",
        state="open",
    )
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://api.github.com/repos/lightningnetwork/lnd/pulls/1234"
    assert call["headers"]["Accept"] == "application/vnd.github.v3+json"
    assert call["headers"]["User-Agent"] == "aurora-cli"
    assert call["timeout"] == 30.0


def test_client_settings_are_applied() -> None:
    session = FakeSession(FakeResponse(200, _pr_payload()))
    client = GitHubClient("https://ghe.example.org/api/v3/", user_agent="tester", timeout=5, session=session)

    client.get_pull_request("acme", "lnd", 9)

    call = session.calls[0]
    assert call["url"] == "https://ghe.example.org/api/v3/repos/acme/lnd/pulls/9"
    assert call["headers"]["User-Agent"] == "tester"
    assert call["timeout"] == 5


def test_not_found() -> None:
    client = GitHubClient(session=FakeSession(FakeResponse(404, {"message": "Not Found"})))
    with pytest.raises(NotFound) as exc:
        client.get_pull_request("lightningnetwork", "lnd", 99999)
    assert "#99999" in str(exc.value)
    assert "lightningnetwork/lnd" in str(exc.value)


def test_rate_limited() -> None:
    client = GitHubClient(session=FakeSession(FakeResponse(403, {"message": "API rate limit exceeded"})))
    with pytest.raises(RateLimited) as exc:
        client.get_pull_request("lightningnetwork", "lnd", 1)
    assert "--repo/--branch" in str(exc.value)


def test_other_status_is_remote_error() -> None:
    client = GitHubClient(session=FakeSession(FakeResponse(502, reason="Bad Gateway")))
    with pytest.raises(RemoteError) as exc:
        client.get_pull_request("lightningnetwork", "lnd", 1)
    assert "502 Bad Gateway" in str(exc.value)


def test_transport_error_is_remote_error() -> None:
    client = GitHubClient(session=FakeSession(requests.ConnectionError("connection refused")))
    with pytest.raises(RemoteError) as exc:
        client.get_pull_request("lightningnetwork", "lnd", 1)
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("payload", [_NO_JSON, ["not", "an", "object"]])
def test_undecodable_body(payload: Any) -> None:
    client = GitHubClient(session=FakeSession(FakeResponse(200, payload)))
    with pytest.raises(DecodeError):
        client.get_pull_request("lightningnetwork", "lnd", 1)


@pytest.mark.parametrize("clone_url", ["", None])
def test_deleted_fork(clone_url: str | None) -> None:
    client = GitHubClient(session=FakeSession(FakeResponse(200, _pr_payload(clone_url))))
    with pytest.raises(ForkUnavailable):
        client.get_pull_request("lightningnetwork", "lnd", 1)
