"""
Shell command runner — the single place ``subprocess`` is called.

Two modes:

    run_captured     stdin closed, output captured (probes, installers
                     that never prompt)
    run_interactive  streams inherited (installers that prompt a human)

Both return a ``CommandResult``; neither raises on failure.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from asl3_mapp.adapters.base import CommandResult, Runner

logger = logging.getLogger(__name__)


class CommandRunner(Runner):
    """Run host commands via ``subprocess.run``.

    Args:
        timeout: Optional ceiling for captured commands, in seconds.
            Interactive commands are bounded only by the child program.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    def run_captured(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        cmd = [str(part) for part in command]
        logger.debug("Executing: %s (cwd=%s)", cmd, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=_merge_env(env),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=cmd,
                error=f"Command timed out after {self._timeout}s",
                elapsed_ms=_elapsed(start),
            )
        except OSError as e:
            return CommandResult(
                command=cmd,
                error=f"Command execution error: {e}",
                elapsed_ms=_elapsed(start),
            )

        return CommandResult(
            command=cmd,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=(result.stderr or "").strip(),
            elapsed_ms=_elapsed(start),
        )

    def run_interactive(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        cmd = [str(part) for part in command]
        start = time.monotonic()

        try:
            result = subprocess.run(cmd, cwd=cwd, env=_merge_env(env))
        except OSError as e:
            return CommandResult(
                command=cmd,
                interactive=True,
                error=f"Command execution error: {e}",
                elapsed_ms=_elapsed(start),
            )

        return CommandResult(
            command=cmd,
            returncode=result.returncode,
            interactive=True,
            elapsed_ms=_elapsed(start),
        )


def _merge_env(overrides: Mapping[str, str] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    env = os.environ.copy()
    env.update(overrides)
    return env


def _elapsed(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
