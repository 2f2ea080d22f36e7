"""Supermon-NG — release tarball with its own install.sh."""

from __future__ import annotations

import logging
from pathlib import Path

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import ArchiveStep

logger = logging.getLogger(__name__)


class SupermonNGStep(ArchiveStep):
    name = "supermon-ng"
    flag = "-s"
    description = "Install Supermon-NG"
    release_key = "supermon-ng"
    tar_flags = "-xJf"

    @property
    def marker_path(self) -> Path:
        return self.settings.supermon_install_dir / "includes" / "common.inc"

    def prepare(self, context: InvocationContext) -> None:
        logger.info("Installing Supermon-NG...")

    def install_tree(self, context: InvocationContext, tree: Path) -> None:
        logger.info("Running Supermon-NG installer...")
        self.run(["./install.sh"], cwd=tree, what="Supermon-NG installation")
        logger.info("Supermon-NG installation completed successfully")
