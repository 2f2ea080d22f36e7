"""
Mock adapters — test doubles for the runner and the fetcher.

Configurable to succeed, fail, or return custom results per command
prefix.  Every call is recorded so tests can assert on what would
have been executed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from asl3_mapp.adapters.base import CommandResult, Fetcher, Runner
from asl3_mapp.core.errors import DownloadError


@dataclass
class CommandCall:
    """One command the mock runner received."""

    command: list[str]
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    interactive: bool = False


class MockCommandRunner(Runner):
    """Universal mock runner.

    By default every command succeeds with empty output.  Responses
    are matched on the longest configured command prefix.
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, ...], CommandResult] = {}
        self._call_log: list[CommandCall] = []

    @property
    def call_log(self) -> list[CommandCall]:
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        return [call.command for call in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_response(self, prefix: Sequence[str], result: CommandResult) -> None:
        """Return ``result`` for any command starting with ``prefix``."""
        self._responses[tuple(prefix)] = result

    def set_failure(
        self, prefix: Sequence[str], stderr: str = "Mock failure", returncode: int = 1
    ) -> None:
        """Make every command starting with ``prefix`` exit non-zero."""
        self._responses[tuple(prefix)] = CommandResult(
            command=list(prefix), returncode=returncode, stderr=stderr
        )

    def reset(self) -> None:
        self._responses.clear()
        self._call_log.clear()

    def run_captured(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        return self._record(command, cwd, env, interactive=False)

    def run_interactive(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        return self._record(command, cwd, env, interactive=True)

    def _record(
        self,
        command: Sequence[str],
        cwd: Path | str | None,
        env: Mapping[str, str] | None,
        interactive: bool,
    ) -> CommandResult:
        cmd = [str(part) for part in command]
        self._call_log.append(
            CommandCall(
                command=cmd,
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env or {}),
                interactive=interactive,
            )
        )

        match: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(cmd[: len(prefix)]) == prefix and (match is None or len(prefix) > len(match)):
                match = prefix
        if match is not None:
            return self._responses[match].model_copy(
                update={"command": cmd, "interactive": interactive}
            )
        return CommandResult(command=cmd, returncode=0, interactive=interactive)


class MockDownloader(Fetcher):
    """Fetcher that writes canned payloads instead of touching the network."""

    def __init__(self, default_payload: bytes = b"payload") -> None:
        self._default_payload = default_payload
        self._payloads: dict[str, bytes] = {}
        self._failures: set[str] = set()
        self.fetched: list[tuple[str, Path]] = []

    def set_payload(self, url: str, payload: bytes) -> None:
        self._payloads[url] = payload

    def set_failure(self, url: str) -> None:
        self._failures.add(url)

    def fetch(self, url: str, dest: Path | str, max_attempts: int | None = None) -> Path:
        dest = Path(dest)
        self.fetched.append((url, dest))
        if url in self._failures:
            raise DownloadError(url, max_attempts or 3, "mock failure")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self._payloads.get(url, self._default_payload))
        return dest
