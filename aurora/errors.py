"""
errors.py

Responsibility: the exception types raised across aurora.

Every failure aurora reports to the user derives from `AuroraError`; the CLI
catches that base class, prints the message and exits non-zero.
"""

from __future__ import annotations

from typing import Iterable


class AuroraError(RuntimeError):
    pass


class UsageError(AuroraError):
    pass


class ConfigError(AuroraError):
    pass


class URLParseError(AuroraError, ValueError):
    pass


class InvalidFormat(URLParseError):
    pass


class InvalidNumber(URLParseError):
    pass


class GitHubError(AuroraError):
    pass


class NotFound(GitHubError):
    pass


class RateLimited(GitHubError):
    pass


class RemoteError(GitHubError):
    pass


class DecodeError(GitHubError):
    pass


class ForkUnavailable(GitHubError):
    pass


class UnsupportedNodeType(AuroraError, ValueError):
    def __init__(self, value: str, supported: Iterable[str]) -> None:
        self.value = value
        self.supported = tuple(supported)
        super().__init__(f"invalid node type {value!r}, must be one of: {', '.join(self.supported)}")


class TemplateError(AuroraError):
    pass


class EngineUnavailable(AuroraError):
    pass


class BuildFailed(AuroraError):
    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(message)
