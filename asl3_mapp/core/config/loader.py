"""
Release catalog loader — reads releases.yml into typed models.

The catalog pins the version, download URL and artifact name of
every package the installer fetches.  It ships inside the package;
tests may point ``load_releases`` at their own file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from asl3_mapp.core.errors import InstallerError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "releases.yml"


class ConfigError(InstallerError):
    """Raised when the release catalog is missing or invalid."""


class Release(BaseModel):
    """One downloadable artifact.

    ``url``, ``artifact`` and ``extract_dir`` are templates; call
    :meth:`render` to substitute ``{version}`` and any extra fields.
    """

    name: str
    version: str = ""
    url: str
    artifact: str
    extract_dir: str = ""
    package: str = ""

    def render(self, **fields: str) -> Release:
        """Return a copy with every template field filled in."""
        values = {"version": self.version, **fields}
        return self.model_copy(
            update={
                "url": self.url.format(**values),
                "artifact": self.artifact.format(**values),
                "extract_dir": self.extract_dir.format(**values),
            }
        )


def load_releases(path: Path | None = None) -> dict[str, Release]:
    """Load and validate the release catalog.

    Args:
        path: Catalog file.  Defaults to the bundled ``releases.yml``.

    Returns:
        Mapping of release name to ``Release``.

    Raises:
        ConfigError: If the file is missing, not YAML, or malformed.
    """
    path = path or DEFAULT_CATALOG
    if not path.is_file():
        raise ConfigError(f"Release catalog not found: {path}")

    logger.debug("Loading release catalog from %s", path)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Release catalog must be a mapping: {path}")

    releases: dict[str, Release] = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Release '{name}' must be a mapping")
        try:
            releases[name] = Release(name=name, **{k: str(v) for k, v in entry.items()})
        except ValidationError as e:
            raise ConfigError(f"Release '{name}' is invalid: {e}") from e

    return releases
