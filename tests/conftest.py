from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable

import pytest

from aurora import docker_builder

ENGINE_SCRIPT = """#!/bin/sh
if [ "$1" = "info" ]; then
  exit {info_status}
fi
for a in "$@"; do
  echo "arg:$a"
done
echo "step from stderr" >&2
{tail}
"""

TAILS = {
    "exit": 'cat "$9"\nexit {build_status}',
    # exec so the signal reaches the process holding the pipes
    "hang": "touch \"$0.ready\"\nexec sleep 30",
    "ignore-term": "trap '' TERM\ntouch \"$0.ready\"\nexec sleep 30",
    "flood": (
        "long=$(printf '%{line_length}s' '' | tr ' ' x)\n"
        "i=0\n"
        "while [ $i -lt {line_count} ]; do\n"
        '  echo "out-$i-$long"\n'
        '  echo "err-$i-$long" >&2\n'
        "  i=$((i+1))\n"
        "done\n"
        "exit 0"
    ),
}


@pytest.fixture(autouse=True)
def _fresh_engine_probe(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(docker_builder, "_available_engines", set())


@pytest.fixture()
def fake_engine(tmp_path: Path) -> Callable[..., Path]:
    """
    Write a stand-in for the docker CLI.

    `info` exits with `info_status`. `build` echoes its arguments one per line
    (prefixed with `arg:`) and writes a line to stderr, then depending on `mode`:
    - "exit": prints the Dockerfile and exits with `build_status`
    - "hang": touches `<script>.ready`, then sleeps until signalled
    - "ignore-term": ignores SIGTERM, touches `<script>.ready`, then sleeps
    - "flood": writes `line_count` long lines to each of stdout and stderr
    """

    def make(
        *,
        info_status: int = 0,
        build_status: int = 0,
        mode: str = "exit",
        line_count: int = 200,
        line_length: int = 2000,
    ) -> Path:
        tail = TAILS[mode].format(build_status=build_status, line_count=line_count, line_length=line_length)
        path = tmp_path / "fake-docker"
        path.write_text(ENGINE_SCRIPT.format(info_status=info_status, tail=tail), encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return path

    return make
