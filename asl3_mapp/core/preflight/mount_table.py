"""
Mount table model — parse, canonicalize and render /etc/fstab.

The table is an ordered list of lines.  Comments, blanks and lines
that do not look like a mount record are opaque and round-trip
verbatim.  Structured records keep their raw text too, so a table
that needs no change renders byte-for-byte identical.

Canonical form (what ``canonicalize_tmpfs`` produces):
    - exactly one active tmpfs record for the short-lived temp mount,
      rewritten to the bounded canonical line
    - every other active tmpfs record commented out, never deleted
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_COMMENT_OR_BLANK = re.compile(r"^\s*(#|$)")


@dataclass(frozen=True)
class MountEntry:
    """A structured fstab record plus the exact line it came from."""

    device: str
    mount_point: str
    fs_type: str
    options: str = ""
    dump_freq: str = ""
    pass_no: str = ""
    raw: str = ""

    @property
    def is_tmpfs(self) -> bool:
        return self.device == "tmpfs" and self.fs_type == "tmpfs"

    @classmethod
    def parse(cls, line: str) -> MountEntry | None:
        """Parse a record line, or return None if it isn't one."""
        if _COMMENT_OR_BLANK.match(line):
            return None
        parts = line.strip().split(None, 5)
        if len(parts) < 4:
            return None
        parts += [""] * (6 - len(parts))
        return cls(*parts[:6], raw=line)


@dataclass
class MountTable:
    """Ordered fstab lines; each is a ``MountEntry`` or an opaque string."""

    lines: list[MountEntry | str] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> MountTable:
        table = cls()
        for line in text.splitlines(keepends=True):
            entry = MountEntry.parse(line)
            table.lines.append(entry if entry is not None else line)
        return table

    def render(self) -> str:
        return "".join(line.raw if isinstance(line, MountEntry) else line for line in self.lines)

    @property
    def entries(self) -> list[MountEntry]:
        return [line for line in self.lines if isinstance(line, MountEntry)]

    def active_tmpfs(self, mount_point: str | None = None) -> list[MountEntry]:
        return [
            e for e in self.entries
            if e.is_tmpfs and (mount_point is None or e.mount_point == mount_point)
        ]


def _terminated(line: str) -> str:
    return line if line.endswith("\n") else line + "\n"


def canonicalize_tmpfs(table: MountTable, mount_point: str, canonical_line: str) -> MountTable:
    """Return a new table with a single bounded tmpfs for ``mount_point``.

    The first tmpfs record targeting ``mount_point`` becomes
    ``canonical_line``; any other active tmpfs record (including a
    duplicate for ``mount_point``) is commented out.  If none targeted
    ``mount_point``, the canonical line is appended.
    """
    if MountEntry.parse(canonical_line) is None:
        raise ValueError(f"Not a mount record: {canonical_line!r}")

    out = MountTable()
    emitted = False

    for line in table.lines:
        if not isinstance(line, MountEntry) or not line.is_tmpfs:
            out.lines.append(line)
            continue

        if line.mount_point == mount_point and not emitted:
            ending = "\n" if line.raw.endswith("\n") else ""
            out.lines.append(MountEntry.parse(canonical_line + ending))
            emitted = True
        else:
            out.lines.append(f"# {line.raw}")

    if not emitted:
        if out.lines:
            last = out.lines[-1]
            if isinstance(last, MountEntry):
                out.lines[-1] = MountEntry.parse(_terminated(last.raw))
            else:
                out.lines[-1] = _terminated(last)
        out.lines.append(MountEntry.parse(_terminated(canonical_line)))

    return out
