"""
Filesystem edits — small, idempotent config file changes.

These are the "apply a named action" primitives steps use to patch
configuration left behind by third-party installers.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)


def set_kv_line(path: Path, key: str, value: str) -> None:
    """Write ``key=value`` into a shell-style config file.

    Creates the file if absent, replaces an existing ``key=`` line in
    place, and appends otherwise.  Other lines are left untouched.
    """
    line = f"{key}={value}\n"

    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(line, encoding="utf-8")
        return

    pattern = re.compile(rf"^\s*{re.escape(key)}\s*=")
    updated = False
    out: list[str] = []
    for existing in path.read_text(encoding="utf-8").splitlines(keepends=True):
        if pattern.match(existing):
            out.append(line)
            updated = True
        else:
            out.append(existing)

    if not updated:
        if out and not out[-1].endswith("\n"):
            out[-1] += "\n"
        out.append(line)

    path.write_text("".join(out), encoding="utf-8")


def replace_token(path: Path, old: str, new: str) -> bool:
    """Replace every occurrence of ``old`` with ``new`` in ``path``.

    Returns:
        True if the file contained ``old`` and was rewritten.
    """
    content = path.read_text(encoding="utf-8")
    if old not in content:
        return False
    path.write_text(content.replace(old, new), encoding="utf-8")
    logger.debug("Replaced %r with %r in %s", old, new, path)
    return True


def chown_tree(root: Path, uid: int, gid: int) -> None:
    """Recursively hand ``root`` and everything under it to ``uid:gid``.

    Symlinks are re-owned themselves, never followed.
    """
    os.lchown(root, uid, gid)
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            os.lchown(os.path.join(dirpath, name), uid, gid)
