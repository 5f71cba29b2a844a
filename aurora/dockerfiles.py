"""
dockerfiles.py

Responsibility: map a node type to its bundled Dockerfile template and render it.

Rules:
- Templates live in `aurora/templates/<node-type>/Dockerfile` as package data.
- Each template is parameterised by exactly two values, `git_url` and
  `checkout`, which are rendered in as `ARG` defaults (the build still passes
  them as `--build-arg` so the values are visible in the engine's output).
- `git_url` and `checkout` must not contain whitespace or control characters;
  each has to fit on one `ARG` line.
"""

from __future__ import annotations

import enum
import unicodedata
from importlib import resources

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

from aurora.errors import TemplateError, UnsupportedNodeType


class NodeType(enum.Enum):
    BITCOIND = "bitcoind"
    LND = "lnd"
    ECLAIR = "eclair"
    CLN = "cln"
    LITD = "litd"
    TAPD = "tapd"

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def parse(cls, value: "str | NodeType") -> "NodeType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedNodeType(str(value), cls.names()) from None


_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def select_template(node_type: str | NodeType) -> bytes:
    """
    Return the raw Dockerfile template bundled for `node_type`.
    """
    nt = NodeType.parse(node_type)
    resource = resources.files("aurora.templates") / nt.value / "Dockerfile"
    try:
        return resource.read_bytes()
    except OSError as e:
        raise TemplateError(f"failed to read {nt.value} Dockerfile") from e


def _check_build_arg(name: str, value: str) -> None:
    if any(ch.isspace() or unicodedata.category(ch) in ("Cc", "Cf") for ch in value):
        raise TemplateError(f"{name} must not contain whitespace or control characters: {value!r}")


def render_template(node_type: str | NodeType, *, git_url: str, checkout: str) -> str:
    nt = NodeType.parse(node_type)
    _check_build_arg("git_url", git_url)
    _check_build_arg("checkout", checkout)
    text = select_template(nt).decode("utf-8")
    try:
        return _env.from_string(text).render(git_url=git_url, checkout=checkout)
    except JinjaTemplateError as e:
        raise TemplateError(f"failed rendering {nt.value} Dockerfile") from e
