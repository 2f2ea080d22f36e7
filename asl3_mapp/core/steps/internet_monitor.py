"""internet-monitor — connectivity announcements for mobile nodes."""

from __future__ import annotations

import logging

from asl3_mapp.adapters.shell.filesystem import set_kv_line
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import DebPackageStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)

SERVICE = "internet-monitor"


class InternetMonitorStep(DebPackageStep):
    name = "internet-monitor"
    flag = "-m"
    description = "Install internet-monitor (mobile nodes; prompts for NODE_NUMBER)"
    release_key = "internet-monitor"

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        logger.info("Installing internet-monitor (primarily for mobile nodes)...")
        node_number = self.services.node_number.get()

        self.install_deb(workspace)

        conf = self.settings.internet_monitor_conf
        logger.info("Writing NODE_NUMBER=%s to %s...", node_number, conf)
        set_kv_line(conf, "NODE_NUMBER", node_number)

        self.enable_service(SERVICE)
