"""
aurora package

Aurora builds Docker images from GitHub PRs and forks for Lightning Polar's
supported node implementations.

Key responsibilities are split across modules:
- `github_urls.py`: parse PR / repository URLs into structured references
- `github_client.py`: the single GitHub REST API call (PR head lookup)
- `dockerfiles.py`: node types and their bundled Dockerfile templates
- `docker_builder.py`: run `docker build` and relay its output
- `cli.py`: CLI entrypoint and orchestration (parse -> fetch -> build)
"""

from __future__ import annotations

__all__ = ["__version__", "__commit__"]

__version__ = "0.1.0"

# Overwritten by release tooling.
__commit__ = "dev"
