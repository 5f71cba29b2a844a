"""
log.py

Responsibility: configure and hand out `aurora.*` loggers.

Diagnostics go to stderr through the `aurora` logger; user-facing progress is
printed to stdout by the CLI and is not routed through logging.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

BASE_LOGGER = "aurora"


def setup_logging(*, verbose: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    Configure the base `aurora` logger once and return it.

    Later calls only adjust the level.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(level)
    if base.handlers:
        return base

    base.propagate = False
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    base.addHandler(handler)
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(f"{BASE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")
