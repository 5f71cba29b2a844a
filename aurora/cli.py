"""
cli.py

Responsibility: CLI entrypoint for aurora.

High-level flow (command `build`):
1) Validate flags -> `BuildOptions`
2) PR mode: parse PR URL -> fetch PR head from GitHub
   Repo mode: parse repository URL -> clone URL + given branch
3) Build the image with the Dockerfile template for the node type

This module should orchestrate behavior but keep concerns isolated:
- URL parsing: `github_urls.py`
- GitHub API: `github_client.py`
- Templates: `dockerfiles.py`
- Docker: `docker_builder.py`
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from aurora import __commit__, __version__
from aurora.config import Settings, load_settings
from aurora.docker_builder import BuildRequest, DockerBuilder
from aurora.dockerfiles import NodeType
from aurora.errors import AuroraError, UsageError
from aurora.github_client import GitHubClient
from aurora.github_urls import parse_pull_request_url, parse_repository_url
from aurora.log import get_logger, setup_logging

log = get_logger(__name__)


@dataclass(frozen=True)
class BuildOptions:
    """Flag values of one `build` invocation."""

    tag: str
    node_type: str
    pr_url: str | None = None
    repo_url: str | None = None
    branch: str | None = None


def validate_options(opts: BuildOptions) -> NodeType:
    """
    Check flag combinations; return the parsed node type.

    Runs before any network or process activity.
    """
    if not opts.pr_url and not opts.repo_url:
        raise UsageError("either --pr or --repo must be specified")
    if opts.pr_url and opts.repo_url:
        raise UsageError("cannot specify both --pr and --repo")
    if opts.repo_url and not opts.branch:
        raise UsageError("--branch is required when using --repo")
    if opts.pr_url and opts.branch:
        raise UsageError("--branch can only be used with --repo (the PR's branch is used with --pr)")
    if not opts.tag.strip():
        raise UsageError("--tag must not be empty")
    return NodeType.parse(opts.node_type)


def image_reference(tag: str, suffix: str) -> str:
    """
    Append `:<suffix>` unless `tag` already names a version.

    A colon before the last `/` belongs to a registry port, not a version.
    """
    if not suffix or ":" in tag.rsplit("/", 1)[-1]:
        return tag
    return f"{tag}:{suffix}"


def run_build(
    opts: BuildOptions,
    *,
    settings: Settings,
    client: GitHubClient | None = None,
    builder_factory: Callable[[], DockerBuilder] | None = None,
    out: TextIO | None = None,
) -> int:
    out = out or sys.stdout
    node_type = validate_options(opts)

    def say(line: str = "") -> None:
        print(line, file=out, flush=True)

    say("🚀 Aurora Build")
    say("===============")

    if opts.pr_url:
        pr = parse_pull_request_url(opts.pr_url, host=settings.github_host)
        say(f"📋 PR:     {pr.owner}/{pr.repo}#{pr.number}")
        say("🔍 Fetching PR details from GitHub...")

        gh = client or GitHubClient(
            settings.api_base,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout,
        )
        details = gh.get_pull_request(pr.owner, pr.repo, pr.number)

        say(f"📝 Title:  {details.title}")
        say(f"📊 State:  {details.state}")
        say(f"🔗 Fork:   {details.fork_clone_url}")
        say(f"🌿 Branch: {details.branch}")
        git_url, checkout = details.fork_clone_url, details.branch
    else:
        repo = parse_repository_url(opts.repo_url or "", host=settings.github_host)
        git_url, checkout = repo.clone_url, opts.branch or ""
        say(f"🔗 Repo:   {git_url}")
        say(f"🌿 Branch: {checkout}")

    image = image_reference(opts.tag, settings.image_suffix)
    say(f"📦 Type:   {node_type.value}")
    say(f"🏷️  Tag:    {image}")
    say()

    if builder_factory is None:
        builder = DockerBuilder(settings.engine, out=out)
    else:
        builder = builder_factory()

    say("🔨 Building Docker image...")
    say("----------------------------")
    builder.build(BuildRequest(git_url=git_url, checkout=checkout, image_tag=image, node_type=node_type))

    say()
    say("----------------------------")
    say(f"✅ Build complete! Image: {image}")
    say()
    say("To use in Polar, add this as a custom node image.")
    return 0


def build_cmd(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    opts = BuildOptions(
        tag=args.tag,
        node_type=args.node_type,
        pr_url=args.pr,
        repo_url=args.repo,
        branch=args.branch,
    )
    return run_build(opts, settings=settings)


def version_cmd(args: argparse.Namespace) -> int:
    print(f"Aurora v{__version__} (commit: {__commit__})")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="aurora",
        description="Build custom Docker images from GitHub PRs for Polar",
        epilog=f"Supported node types: {', '.join(NodeType.names())}",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser(
        "build",
        help="Build a Docker image from a GitHub PR or fork",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  aurora build --pr https://github.com/lightningnetwork/lnd/pull/1234 --node-type lnd --tag my-lnd-test\n"
            "  aurora build --repo https://github.com/myuser/lnd --branch feature-x --node-type lnd --tag my-lnd-fork"
        ),
    )
    b.add_argument("--pr", default=None, help="GitHub PR URL (e.g., https://github.com/owner/repo/pull/123)")
    b.add_argument("--repo", default=None, help="GitHub repository URL (e.g., https://github.com/owner/repo)")
    b.add_argument("--branch", default=None, help="Branch, tag or commit to build (required with --repo)")
    b.add_argument(
        "--node-type",
        required=True,
        help=f"Node type: {', '.join(NodeType.names())}",
    )
    b.add_argument("--tag", required=True, help="Custom tag for the Docker image")
    b.add_argument("--config", default=None, help="YAML settings file (or set env AURORA_CONFIG)")
    b.set_defaults(func=build_cmd)

    v = sub.add_parser("version", help="Print the version number of Aurora")
    v.set_defaults(func=version_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=bool(args.verbose))
    try:
        return int(args.func(args))
    except AuroraError as e:
        log.debug("command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
