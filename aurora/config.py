"""
config.py

Responsibility: load aurora's tunables into a typed, immutable `Settings`.

Precedence (lowest to highest):
- built-in defaults
- a YAML file (`--config`, or `$AURORA_CONFIG` when no path is given)
- `AURORA_*` environment variables

The YAML file is a flat mapping whose keys are `Settings` field names.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from aurora.errors import ConfigError
from aurora.log import get_logger

log = get_logger(__name__)

CONFIG_ENV_VAR = "AURORA_CONFIG"

_ENV_KEYS = {
    "AURORA_GITHUB_HOST": "github_host",
    "AURORA_API_BASE": "api_base",
    "AURORA_USER_AGENT": "user_agent",
    "AURORA_HTTP_TIMEOUT": "http_timeout",
    "AURORA_ENGINE": "engine",
    "AURORA_IMAGE_SUFFIX": "image_suffix",
}


@dataclass(frozen=True)
class Settings:
    """Tunables shared by the GitHub client, the builder and the CLI."""

    github_host: str = "github.com"
    api_base: str = "https://api.github.com"
    user_agent: str = "aurora-cli"
    http_timeout: float = 30.0
    engine: str = "docker"
    image_suffix: str = "aurora"


def _coerce(key: str, value: Any) -> Any:
    if key == "http_timeout":
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"`http_timeout` must be a number, got {value!r}") from e
        if timeout <= 0:
            raise ConfigError(f"`http_timeout` must be positive, got {value!r}")
        return timeout
    if value is None:
        raise ConfigError(f"`{key}` must not be empty.")
    return str(value).strip()


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a mapping/object at the top level.")
    return data


def load_settings(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """
    Build `Settings` from defaults, an optional YAML file and the environment.
    """
    env = os.environ if env is None else env
    settings = Settings()
    known = {f.name for f in fields(Settings)}

    if path is None and env.get(CONFIG_ENV_VAR):
        path = env[CONFIG_ENV_VAR]

    if path is not None:
        data = _read_yaml(Path(path))
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        settings = replace(settings, **{k: _coerce(k, v) for k, v in data.items()})
        log.debug("loaded settings from %s", path)

    overrides = {field: _coerce(field, env[var]) for var, field in _ENV_KEYS.items() if env.get(var)}
    if overrides:
        settings = replace(settings, **overrides)
        log.debug("settings overridden from environment: %s", ", ".join(sorted(overrides)))

    return settings
