"""AllScan dashboard — PHP installer that prompts the operator."""

from __future__ import annotations

import logging
import sys

import click

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.observability.logging_config import flush_logs
from asl3_mapp.core.steps.base import InstallStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


class AllScanStep(InstallStep):
    name = "allscan"
    flag = "-a"
    description = "Install AllScan"

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        logger.info("Installing AllScan...")
        self.run(["apt", "install", "-y", "php", "unzip", "asl3-tts"])

        installer = self.download(self.release("allscan"), workspace)
        try:
            installer.chmod(0o755)
            logger.info("Running AllScan installer (may prompt for input)...")
            log_offset = self._log_size()
            self.run_interactive(["php", installer.name], cwd=workspace.path)
            logger.info("AllScan installation completed successfully")
        finally:
            installer.unlink(missing_ok=True)

        self._replay_log(log_offset)

    def _log_size(self) -> int:
        flush_logs()
        log_file = self.settings.log_file
        return log_file.stat().st_size if log_file.is_file() else 0

    def _replay_log(self, offset: int) -> None:
        """Clear the installer's prompts and show only this run's log lines."""
        if not sys.stdout.isatty():
            return
        flush_logs()
        with open(self.settings.log_file, encoding="utf-8", errors="replace") as fh:
            fh.seek(offset)
            click.clear()
            click.echo(fh.read(), nl=False)
