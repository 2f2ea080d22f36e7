"""sayip-node-utils — SayIP / reboot / halt / public IP DTMF helpers."""

from __future__ import annotations

import logging

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import DebPackageStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


class SayIPNodeUtilsStep(DebPackageStep):
    """Installed with ``dpkg -i`` so the package's maintainer scripts
    can read NODE_NUMBER from the environment; apt then fills in any
    missing dependencies.
    """

    name = "sayip-node-utils"
    flag = "-i"
    description = "Install sayip-node-utils (prompts for NODE_NUMBER)"
    release_key = "sayip-node-utils"

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        logger.info("Installing sayip-node-utils (SayIP/reboot/halt/public IP)...")
        node_number = self.services.node_number.get()

        release = self.release(self.release_key)
        deb = self.download(release, workspace)
        try:
            verb = "Reinstalling" if self.package_installed(release.package) else "Installing"
            logger.info("%s sayip-node-utils for NODE_NUMBER=%s...", verb, node_number)
            self.run(
                ["dpkg", "-i", f"./{deb.name}"],
                cwd=workspace.path,
                env={"NODE_NUMBER": node_number},
            )
            self.run(["apt", "install", "-f", "-y"], cwd=workspace.path)
        finally:
            deb.unlink(missing_ok=True)

        logger.info(
            'Post-install: you may need `sudo asterisk -rx "rpt reload"` '
            "(and/or restart asterisk) for new DTMF config to load."
        )
