"""
docker_builder.py

Responsibility: build a node image by shelling out to the Docker CLI.

Rules:
- The engine is probed (`docker info`) before the first build in a process.
- The rendered Dockerfile lives in a private scratch directory that is removed
  when the build finishes, whether it succeeded or not.
- stdout and stderr of the engine are drained by two reader threads and
  forwarded line by line to the caller's output; lines from the two streams may
  interleave, but a single line is never split.
- Success is decided by the engine's exit status alone.

This module intentionally does NOT know about GitHub or CLI parsing.
"""

from __future__ import annotations

import subprocess
import sys
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, TextIO

from aurora.dockerfiles import NodeType, render_template
from aurora.errors import BuildFailed, EngineUnavailable
from aurora.log import get_logger

log = get_logger(__name__)

# Seconds to wait for the engine to exit after SIGTERM before killing it.
TERMINATE_GRACE = 10.0

_available_engines: set[str] = set()


@dataclass(frozen=True)
class BuildRequest:
    git_url: str
    checkout: str  # branch, tag or commit
    image_tag: str
    node_type: NodeType


def check_engine_available(engine: str = "docker") -> None:
    """
    Raise EngineUnavailable unless `<engine> info` succeeds.

    A successful probe is remembered for the rest of the process.
    """
    if engine in _available_engines:
        return
    try:
        result = subprocess.run(
            [engine, "info"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        raise EngineUnavailable(
            f"{engine} is not available ({e}). Please ensure Docker is installed and the daemon is running"
        ) from e
    if result.returncode != 0:
        raise EngineUnavailable(
            f"{engine} is not available or not running. Please ensure Docker is installed and the daemon is running"
        )
    _available_engines.add(engine)


class _LineWriter:
    """Serialises whole-line writes from several threads onto one stream."""

    def __init__(self, out: TextIO) -> None:
        self._out = out
        self._lock = threading.Lock()

    def write_line(self, line: str) -> None:
        with self._lock:
            self._out.write(line + "\n")
            self._out.flush()


def _drain(stream: IO[str], writer: _LineWriter, name: str) -> None:
    try:
        for line in stream:
            writer.write_line(line.rstrip("\r\n"))
    except (OSError, ValueError) as e:
        # Streaming is best-effort; the exit status decides the outcome.
        log.debug("stopped reading engine %s: %s", name, e)


def _terminate(proc: subprocess.Popen) -> None:
    proc.terminate()
    try:
        proc.wait(timeout=TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.wait()


class DockerBuilder:
    def __init__(self, engine: str = "docker", *, out: TextIO | None = None) -> None:
        check_engine_available(engine)
        self._engine = engine
        self._writer = _LineWriter(out or sys.stdout)

    def command(self, request: BuildRequest, *, dockerfile: Path, context_dir: Path) -> list[str]:
        return [
            self._engine,
            "build",
            "--build-arg",
            f"git_url={request.git_url}",
            "--build-arg",
            f"checkout={request.checkout}",
            "-t",
            request.image_tag,
            "-f",
            str(dockerfile),
            str(context_dir),
        ]

    def build(self, request: BuildRequest) -> None:
        """
        Build `request.image_tag`, streaming the engine's output as it arrives.
        """
        dockerfile_text = render_template(request.node_type, git_url=request.git_url, checkout=request.checkout)

        with tempfile.TemporaryDirectory(prefix="aurora-build-") as tmp:
            context_dir = Path(tmp)
            dockerfile = context_dir / "Dockerfile"
            dockerfile.write_text(dockerfile_text, encoding="utf-8")
            log.debug("build context: %s", context_dir)

            cmd = self.command(request, dockerfile=dockerfile, context_dir=context_dir)
            returncode = self._run(cmd)

        if returncode != 0:
            raise BuildFailed(
                f"{self._engine} build failed: exit status {returncode}",
                returncode=returncode,
            )

    def _run(self, cmd: list[str]) -> int:
        log.debug("running: %s", " ".join(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise BuildFailed(f"failed to start {self._engine} build: {e}") from e

        with proc:
            readers = [
                threading.Thread(target=_drain, args=(proc.stdout, self._writer, "stdout"), daemon=True),
                threading.Thread(target=_drain, args=(proc.stderr, self._writer, "stderr"), daemon=True),
            ]
            for t in readers:
                t.start()
            try:
                returncode = proc.wait()
            except KeyboardInterrupt:
                log.debug("interrupted; stopping %s build", self._engine)
                _terminate(proc)
                raise
            finally:
                for t in readers:
                    t.join()

        log.debug("%s build exited with status %s", self._engine, returncode)
        return returncode
