"""
Install step contract — one shared shape for every package.

Every step exposes:

    is_already_satisfied()        best-effort probe; False means "attempt"
    execute(context, workspace)   install, or raise an InstallerError

Steps hold no state between runs beyond their static metadata; the
host (installed packages, unit files, config files) is the only
memory.  Each step removes its own downloads and unpacked trees from
the workspace before returning, whether it succeeded or not.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from asl3_mapp.adapters.base import CommandResult, Fetcher, Runner
from asl3_mapp.core.config.loader import Release
from asl3_mapp.core.config.settings import InstallerSettings
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.errors import CommandError, StepError
from asl3_mapp.core.steps.node import NodeNumberSource
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


@dataclass
class StepServices:
    """Collaborators shared by every step in a run."""

    runner: Runner
    fetcher: Fetcher
    settings: InstallerSettings
    releases: dict[str, Release]
    node_number: NodeNumberSource


class InstallStep(ABC):
    """Abstract base class for all install steps.

    To add a package:
        1. Subclass InstallStep (or one of the family bases below)
        2. Set name, flag, description
        3. Implement execute (and is_already_satisfied if it can probe)
        4. Add it to STEP_ORDER in the registry
    """

    name: str = ""
    flag: str = ""
    description: str = ""

    def __init__(self, services: StepServices):
        self.services = services

    @property
    def runner(self) -> Runner:
        return self.services.runner

    @property
    def settings(self) -> InstallerSettings:
        return self.services.settings

    def is_already_satisfied(self) -> bool:
        return False

    @abstractmethod
    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        """Install the package.

        Raises:
            InstallerError: Any fatal failure; the run halts.
        """

    # ── Helpers ─────────────────────────────────────────────────

    def release(self, key: str, **fields: str) -> Release:
        try:
            return self.services.releases[key].render(**fields)
        except KeyError:
            raise StepError(f"No release '{key}' in the release catalog") from None

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        what: str = "",
    ) -> CommandResult:
        """Run a captured command that must succeed."""
        result = self.runner.run_captured(command, cwd=cwd, env=env)
        if not result.ok:
            message = f"{what} failed" if what else ""
            raise CommandError(result.command, result.returncode, result.detail, message)
        return result

    def run_interactive(
        self,
        command: Sequence[str],
        *,
        cwd: Path | str | None = None,
    ) -> None:
        """Run a command that may prompt the operator; it must succeed."""
        logger.info("Running: %s", " ".join(str(part) for part in command))
        result = self.runner.run_interactive(command, cwd=cwd)
        if not result.ok:
            raise CommandError(result.command, result.returncode, result.detail)

    def download(self, release: Release, workspace: ScratchWorkspace) -> Path:
        logger.info("Downloading %s...", release.artifact)
        return self.services.fetcher.fetch(
            release.url, workspace.path / release.artifact,
            self.settings.download.max_attempts,
        )

    def package_installed(self, package: str) -> bool:
        return self.runner.run_captured(["dpkg", "-s", package]).ok

    def enable_service(self, unit: str) -> None:
        logger.info("Enabling and starting %s service...", unit)
        self.run(["systemctl", "enable", unit])
        self.run(["systemctl", "start", unit])

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} flag={self.flag!r}>"


class DebPackageStep(InstallStep):
    """A ``.deb`` handed to apt: reinstall when present, install otherwise."""

    release_key: str = ""

    def install_deb(self, workspace: ScratchWorkspace) -> None:
        release = self.release(self.release_key)
        deb = self.download(release, workspace)
        try:
            already = self.package_installed(release.package)
            logger.info("Reinstalling .deb package..." if already else "Installing .deb package...")
            self.run(apt_deb_command(deb.name, reinstall=already), cwd=workspace.path)
        finally:
            deb.unlink(missing_ok=True)


class ArchiveStep(InstallStep):
    """A release tarball unpacked and installed by its own script.

    Skipped entirely when ``marker_path`` exists.
    """

    release_key: str = ""
    tar_flags: str = "-xzf"

    @property
    def marker_path(self) -> Path | None:
        return None

    def is_already_satisfied(self) -> bool:
        marker = self.marker_path
        return marker is not None and marker.exists()

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        release = self.release(self.release_key)
        self.prepare(context)
        archive = self.download(release, workspace)
        tree = workspace.path / release.extract_dir
        try:
            logger.info("Extracting archive...")
            self.run(["tar", self.tar_flags, archive.name], cwd=workspace.path, what="Extract")
            if not tree.is_dir():
                raise StepError(f"Expected directory {release.extract_dir} not found after extract")
            self.install_tree(context, tree)
        finally:
            archive.unlink(missing_ok=True)
            shutil.rmtree(tree, ignore_errors=True)
        self.finish(context)

    def prepare(self, context: InvocationContext) -> None:
        """Checks that must pass before anything is downloaded."""

    @abstractmethod
    def install_tree(self, context: InvocationContext, tree: Path) -> None:
        """Run the unpacked installer."""

    def finish(self, context: InvocationContext) -> None:
        """Post-install actions once the scratch inputs are gone."""


def apt_deb_command(deb_name: str, *, reinstall: bool) -> list[str]:
    """apt install of a local .deb, in its fresh or reinstall form."""
    cmd = ["apt", "install"]
    if reinstall:
        cmd.append("--reinstall")
    return cmd + ["-y", f"./{deb_name}"]
