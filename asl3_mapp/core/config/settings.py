"""
Installer settings — fixed host paths and the reference policies.

Paths are not configurable at runtime.  The only environment
overrides are the ones the installer has always honoured:

    SUPERMON_INSTALL_DIR   where Supermon-NG lives (idempotency marker)
    MAPP_LOG_LEVEL         console log level (default INFO)

Tests build ``InstallerSettings`` directly with temporary paths.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

LOG_FILE = Path("/var/log/m_app_install.log")
SCRATCH_DIR = Path("/var/tmp/m_app_install")
FSTAB = Path("/etc/fstab")
FSTAB_BACKUP = Path("/etc/fstab.m_app_install.bak")
DVSWITCH_CONFIG = Path("/usr/share/dvswitch/include/config.php")
INTERNET_MONITOR_CONF = Path("/etc/internet-monitor.conf")
SUPERMON_INSTALL_DIR = Path("/var/www/html/supermon-ng")
OS_RELEASE = Path("/etc/os-release")


class DownloadPolicy(BaseModel):
    """Retry and timeout policy for remote fetches."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = 3
    backoff_seconds: float = 2.0
    connect_timeout: float = 30.0
    read_timeout: float = 30.0


class InstallerSettings(BaseModel):
    """Everything the run needs to know about the host layout."""

    model_config = ConfigDict(frozen=True)

    log_file: Path = LOG_FILE
    log_level: str = "INFO"
    scratch_dir: Path = SCRATCH_DIR
    fstab: Path = FSTAB
    fstab_backup: Path = FSTAB_BACKUP
    tmp_mount: str = "/tmp"
    scratch_mount: str = "/var/tmp"
    tmpfs_size: str = "256M"
    dvswitch_config: Path = DVSWITCH_CONFIG
    internet_monitor_conf: Path = INTERNET_MONITOR_CONF
    supermon_install_dir: Path = SUPERMON_INSTALL_DIR
    os_release: Path = OS_RELEASE
    download: DownloadPolicy = DownloadPolicy()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> InstallerSettings:
        """Build settings, applying the supported environment overrides."""
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        if env.get("SUPERMON_INSTALL_DIR"):
            overrides["supermon_install_dir"] = Path(env["SUPERMON_INSTALL_DIR"])
        if env.get("MAPP_LOG_LEVEL"):
            overrides["log_level"] = env["MAPP_LOG_LEVEL"].upper()
        return cls(**overrides)

    @property
    def fstab_tmp_line(self) -> str:
        """The single canonical tmpfs entry for the short-lived temp mount."""
        return (
            f"tmpfs           {self.tmp_mount:<16}tmpfs   "
            f"defaults,noatime,nosuid,nodev,mode=1777,size={self.tmpfs_size} 0 0"
        )
