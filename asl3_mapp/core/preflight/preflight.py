"""
Filesystem preflight — make the scratch mounts safe before installing.

Some images mount /var/tmp (and friends) as ``noexec`` tmpfs, which
breaks every installer that unpacks and runs a script from the
scratch workspace.  Before any step runs, preflight:

    1. rewrites /etc/fstab so only /tmp is tmpfs (bounded, canonical)
       and every other tmpfs record is commented out, after saving a
       backup next to it
    2. asks the operator to acknowledge that a reboot is recommended
       (interactive sessions only)
    3. unmounts /var/tmp if it is currently a mount point so this run
       can use on-disk storage without rebooting

An fstab that is missing, unreadable or unwritable is left alone
without comment.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass

import click

from asl3_mapp.adapters.base import Runner
from asl3_mapp.core.config.settings import InstallerSettings
from asl3_mapp.core.preflight.mount_table import MountTable, canonicalize_tmpfs

logger = logging.getLogger(__name__)

ConfirmationProvider = Callable[[str], None]

REBOOT_PROMPT = (
    "Reboot now, then re-run this script. "
    "Press Enter to continue without rebooting (not recommended): "
)


def terminal_confirmation(interactive: bool) -> ConfirmationProvider:
    """Confirmation provider bound to the terminal.

    Blocks for Enter when ``interactive``; otherwise returns at once.
    """

    def confirm(message: str) -> None:
        if not interactive:
            logger.debug("Non-interactive session; not waiting for acknowledgment")
            return
        click.prompt(message, default="", show_default=False, prompt_suffix="")

    return confirm


def no_confirmation(message: str) -> None:
    """Confirmation provider that never blocks."""


@dataclass
class PreflightResult:
    """What preflight did."""

    skipped: bool = False
    rewritten: bool = False
    backup_path: str | None = None
    scratch_was_mounted: bool = False
    scratch_unmounted: bool = False


class FilesystemPreflight:
    """Detect and repair the non-executable scratch mount hazard.

    Args:
        settings: Paths of the mount table, its backup, and the mounts.
        runner: Used for ``mountpoint`` / ``umount``.
        confirm: Called with the reboot prompt after a rewrite.
    """

    def __init__(
        self,
        settings: InstallerSettings,
        runner: Runner,
        confirm: ConfirmationProvider = no_confirmation,
    ):
        self._settings = settings
        self._runner = runner
        self._confirm = confirm

    def run(self) -> PreflightResult:
        fstab = self._settings.fstab
        result = PreflightResult()

        if not (fstab.is_file() and os.access(fstab, os.R_OK) and os.access(fstab, os.W_OK)):
            result.skipped = True
            return result

        original = fstab.read_text(encoding="utf-8")
        table = MountTable.parse(original)
        updated = canonicalize_tmpfs(
            table,
            self._settings.tmp_mount,
            self._settings.fstab_tmp_line,
        ).render()

        if updated != original:
            for entry in table.active_tmpfs():
                if entry.mount_point != self._settings.tmp_mount:
                    logger.info("Commenting out tmpfs entry for %s", entry.mount_point)
            self._rewrite(updated)
            result.rewritten = True
            result.backup_path = str(self._settings.fstab_backup)

        self._release_scratch_mount(result)
        return result

    def _rewrite(self, content: str) -> None:
        fstab = self._settings.fstab
        backup = self._settings.fstab_backup

        shutil.copy2(fstab, backup)
        fstab.write_text(content, encoding="utf-8")
        logger.info(
            "Updated %s: single tmpfs for %s, other tmpfs entries commented out. Backup: %s",
            fstab, self._settings.tmp_mount, backup,
        )
        logger.warning(
            "fstab was modified. Reboot before continuing to ensure %s and mounts are "
            "correct and to avoid failures during install.",
            self._settings.tmp_mount,
        )
        self._confirm(REBOOT_PROMPT)

    def _release_scratch_mount(self, result: PreflightResult) -> None:
        mount = self._settings.scratch_mount

        if not self._runner.run_captured(["mountpoint", "-q", mount]).ok:
            logger.info("%s is not mounted; already on disk. This run can proceed.", mount)
            return

        result.scratch_was_mounted = True
        unmount = self._runner.run_captured(["umount", mount])
        if unmount.ok:
            result.scratch_unmounted = True
            logger.info("%s is now on disk; this run can proceed without reboot.", mount)
        else:
            logger.warning(
                "Could not umount %s (in use?); reboot and run again for installs to use disk.",
                mount,
            )
