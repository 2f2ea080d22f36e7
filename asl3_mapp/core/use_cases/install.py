"""
Install use case — one full run, from preflight to teardown.

This is the top-level orchestrator:

    preflight → scratch workspace → selected steps (fixed order) → teardown

The caller has already passed the privilege guard and holds the
``InvocationContext``.  Workspace teardown happens on every exit
path: success, a fatal step error, Ctrl-C, or SIGTERM.
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from asl3_mapp.adapters.base import Fetcher, Runner
from asl3_mapp.core.config.loader import Release, load_releases
from asl3_mapp.core.config.settings import InstallerSettings
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.engine.executor import execute_steps
from asl3_mapp.core.errors import UsageError
from asl3_mapp.core.models.outcome import RunReport
from asl3_mapp.core.preflight.preflight import (
    ConfirmationProvider,
    FilesystemPreflight,
    PreflightResult,
    terminal_confirmation,
)
from asl3_mapp.core.steps.base import StepServices
from asl3_mapp.core.steps.node import NodeNumberSource
from asl3_mapp.core.steps.registry import build_steps
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install run."""

    report: RunReport | None = None
    preflight: PreflightResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.all_ok

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.report:
            result["report"] = self.report.to_dict()
        return result


@contextmanager
def sigterm_as_interrupt() -> Iterator[None]:
    """Turn SIGTERM into KeyboardInterrupt so ``finally`` blocks run."""

    def _handler(signum: int, frame: object) -> None:
        raise KeyboardInterrupt(f"terminated by signal {signum}")

    previous = signal.signal(signal.SIGTERM, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def run_install(
    selected: Iterable[str],
    context: InvocationContext,
    runner: Runner,
    fetcher: Fetcher,
    settings: InstallerSettings | None = None,
    releases: dict[str, Release] | None = None,
    confirm: ConfirmationProvider | None = None,
    node_number: NodeNumberSource | None = None,
    workspace: ScratchWorkspace | None = None,
) -> InstallResult:
    """Install the selected packages.

    Args:
        selected: Step names (see ``STEP_NAMES``); order is irrelevant.
        context: Validated invocation context.
        runner: Command runner for every external command.
        fetcher: Downloader for every remote artifact.
        settings: Host paths and policies (default: from environment).
        releases: Release catalog (default: bundled releases.yml).
        confirm: Reboot acknowledgment provider (default: terminal).
        node_number: NODE_NUMBER source (default: prompt if interactive).
        workspace: Scratch workspace (default: ``settings.scratch_dir``).

    Returns:
        InstallResult with the step report.

    Raises:
        UsageError: No steps were selected.
    """
    selected = list(selected)
    if not selected:
        raise UsageError("No install steps selected.")

    settings = settings or InstallerSettings.from_env()
    services = StepServices(
        runner=runner,
        fetcher=fetcher,
        settings=settings,
        releases=releases if releases is not None else load_releases(),
        node_number=node_number or NodeNumberSource(interactive=context.interactive),
    )
    steps = build_steps(selected, services)

    result = InstallResult()
    logger.info("Starting M-Apps installation script")

    with sigterm_as_interrupt():
        result.preflight = FilesystemPreflight(
            settings, runner, confirm or terminal_confirmation(context.interactive)
        ).run()

        # Created only now so it lands on disk if preflight unmounted the tmpfs.
        with workspace or ScratchWorkspace(settings.scratch_dir) as ws:
            result.report = execute_steps(steps, context, ws)

    if result.report.all_ok:
        logger.info("Installation completed. Log file: %s", settings.log_file)
    else:
        failed = next(o for o in result.report.outcomes if o.failed)
        result.error = failed.error
    return result
