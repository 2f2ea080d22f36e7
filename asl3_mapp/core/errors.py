"""
Error taxonomy — every fatal condition the installer can raise.

Adapters never raise these; they return results. Steps and the
privilege guard raise them, and the executor turns them into a
failed outcome that halts the run.
"""

from __future__ import annotations

from typing import Sequence


class InstallerError(Exception):
    """Base class for fatal installer errors."""


class PrivilegeError(InstallerError):
    """Wrong invocation context (not root, or not escalated via sudo)."""


class UsageError(InstallerError):
    """No install steps were selected."""


class StepError(InstallerError):
    """A step-specific precondition failed."""


class DownloadError(InstallerError):
    """A download failed after every retry was used."""

    def __init__(self, url: str, attempts: int, last_error: str = ""):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to download {url} after {attempts} attempts")


class CommandError(InstallerError):
    """An external command exited non-zero where success was required."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        stderr: str = "",
        message: str = "",
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        text = message or f"Command failed: {' '.join(self.command)}"
        if stderr:
            text = f"{text}\n{stderr}".strip()
        super().__init__(text)
