"""DVSwitch Server — vendor repo installer, apt package, USRP port fix."""

from __future__ import annotations

import logging

from asl3_mapp.adapters.shell.filesystem import replace_token
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import InstallStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)

SUPPORTED_CODENAMES = ("bookworm", "trixie")
DEFAULT_CODENAME = "bookworm"

USRP_PORT_OLD = "31001"
USRP_PORT_NEW = "34001"


class DVSwitchStep(InstallStep):
    name = "dvswitch"
    flag = "-d"
    description = "Install DVSwitch"

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        logger.info("Installing DVSwitch Server...")
        self.run(["apt", "install", "-y", "php-cgi", "libapache2-mod-php"])

        codename = self.distro_codename()
        if codename not in SUPPORTED_CODENAMES:
            codename = DEFAULT_CODENAME

        installer = self.download(self.release("dvswitch", codename=codename), workspace)
        try:
            installer.chmod(0o755)
            logger.info("Running DVSwitch installer...")
            self.run([f"./{installer.name}"], cwd=workspace.path, what="DVSwitch installer")
            logger.info("DVSwitch installer completed")
        finally:
            installer.unlink(missing_ok=True)

        self.run(["apt", "update"])
        self.run(["apt", "install", "-y", "dvswitch-server"])
        self.set_usrp_port()
        logger.info("DVSwitch Server installation completed successfully")

    def distro_codename(self) -> str:
        """VERSION_CODENAME from os-release, then lsb_release, then bookworm."""
        os_release = self.settings.os_release
        if os_release.is_file():
            for line in os_release.read_text(encoding="utf-8", errors="replace").splitlines():
                key, sep, value = line.strip().partition("=")
                if sep and key == "VERSION_CODENAME" and value.strip().strip('"'):
                    return value.strip().strip('"')

        result = self.runner.run_captured(["lsb_release", "-sc"])
        codename = result.stdout.strip() if result.ok else ""
        return codename or DEFAULT_CODENAME

    def set_usrp_port(self) -> None:
        """Move the USRP port from 31001 to 34001; a missing value only warns."""
        config = self.settings.dvswitch_config
        if not config.is_file():
            logger.warning("DVSwitch config file not found: %s", config)
            return
        if replace_token(config, USRP_PORT_OLD, USRP_PORT_NEW):
            logger.info("Updated USRP port from %s to %s", USRP_PORT_OLD, USRP_PORT_NEW)
        else:
            logger.warning("USRP port %s not found in config; no change made", USRP_PORT_OLD)
