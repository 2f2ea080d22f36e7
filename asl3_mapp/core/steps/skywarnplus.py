"""SkywarnPlus-NG — installed as the invoking user, then run as a service."""

from __future__ import annotations

import logging
from pathlib import Path

from asl3_mapp.adapters.shell.filesystem import chown_tree
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.privilege import resolve_invoking_account
from asl3_mapp.core.steps.base import ArchiveStep

logger = logging.getLogger(__name__)

SERVICE = "skywarnplus-ng"
DASHBOARD_PORT = 8100


class SkywarnPlusNGStep(ArchiveStep):
    name = "skywarnplus-ng"
    flag = "-w"
    description = "Install SkywarnPlus-NG (run with sudo so install.sh runs as your user)"
    release_key = "skywarnplus-ng"
    tar_flags = "-xzf"

    def prepare(self, context: InvocationContext) -> None:
        logger.info(
            "Installing SkywarnPlus-NG (install.sh will run as %s)...", context.invoking_user
        )
        resolve_invoking_account(context)

    def install_tree(self, context: InvocationContext, tree: Path) -> None:
        account = resolve_invoking_account(context)

        logger.info("Chowning %s to %s...", tree.name, account.pw_name)
        chown_tree(tree, account.pw_uid, account.pw_gid)

        logger.info("Running SkywarnPlus-NG installer (as non-root)...")
        self.run(
            ["sudo", "-u", account.pw_name, "env", f"HOME={account.pw_dir}", "./install.sh"],
            cwd=tree,
            what="SkywarnPlus-NG installation",
        )
        logger.info("SkywarnPlus-NG installation completed successfully")

    def finish(self, context: InvocationContext) -> None:
        self.enable_service(SERVICE)
        logger.info(
            "SkywarnPlus-NG service enabled and started. "
            "Dashboard: http://localhost:%d (default: admin / skywarn123)",
            DASHBOARD_PORT,
        )
        logger.info(
            "If accessing the dashboard from another machine, open port %d in your "
            "firewall manually (e.g. sudo ufw allow %d/tcp).",
            DASHBOARD_PORT, DASHBOARD_PORT,
        )
