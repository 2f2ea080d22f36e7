"""
Adapter base — the contract between install steps and the host.

Steps never call ``subprocess`` or the network directly.  They go
through a runner (external commands) and a fetcher (downloads), so
tests can swap both for scripted doubles.

Commands are always argument vectors, never shell strings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel


class CommandResult(BaseModel):
    """Outcome of one external command.

    Runners NEVER raise on a non-zero exit — the caller decides
    whether a failure is fatal.
    """

    command: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    interactive: bool = False
    error: str | None = None  # spawn failure or timeout, if any

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    @property
    def detail(self) -> str:
        """Best available error text for logging."""
        return (self.stderr or self.error or "").strip()


class Runner(ABC):
    """Executes external commands two ways."""

    @abstractmethod
    def run_captured(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run without a terminal, capturing stdout/stderr.

        Never waits on terminal input.  Used for probes and
        non-interactive installers.
        """

    @abstractmethod
    def run_interactive(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run with inherited standard streams so the child may prompt.

        Nothing is captured; callers log before invoking.
        """


class Fetcher(ABC):
    """Fetches a remote resource to a local path."""

    @abstractmethod
    def fetch(self, url: str, dest: Path | str, max_attempts: int | None = None) -> Path:
        """Download ``url`` to ``dest``.

        Raises:
            DownloadError: Every attempt failed.  No file is left at ``dest``.
        """

