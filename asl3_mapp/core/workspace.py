"""
Scratch workspace — one directory, created after preflight, always removed.

Usage::

    with ScratchWorkspace(settings.scratch_dir) as workspace:
        ...  # steps download and unpack under workspace.path

``release()`` runs on every exit path out of the ``with`` block —
normal completion, a fatal step error, or an interrupt — and only
ever removes the directory once.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)


class ScratchWorkspace:
    """Owns the lifecycle of the scratch directory."""

    def __init__(self, path: Path, mode: int = 0o755):
        self.path = Path(path)
        self.mode = mode
        self.created_by_us = False
        self._released = False

    @property
    def exists(self) -> bool:
        return self.path.is_dir()

    def acquire(self) -> Path:
        """Create the directory (mode 0755) and return its path."""
        self.created_by_us = not self.path.exists()
        if not self.created_by_us:
            logger.warning(
                "Scratch directory %s already exists; it will be removed when the run ends.",
                self.path,
            )
        self.path.mkdir(parents=True, exist_ok=True)
        self.path.chmod(self.mode)
        self._released = False
        logger.debug("Scratch workspace ready: %s", self.path)
        return self.path

    def release(self) -> None:
        """Recursively remove the directory.  Safe to call more than once."""
        if self._released:
            return
        self._released = True
        if not self.exists:
            return
        shutil.rmtree(self.path, ignore_errors=True)
        logger.debug("Scratch workspace removed: %s", self.path)

    def __enter__(self) -> ScratchWorkspace:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
