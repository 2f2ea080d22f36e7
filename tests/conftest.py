"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from asl3_mapp.adapters.mock import MockCommandRunner, MockDownloader
from asl3_mapp.core.config.loader import load_releases
from asl3_mapp.core.config.settings import DownloadPolicy, InstallerSettings
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import StepServices
from asl3_mapp.core.steps.node import NodeNumberSource
from asl3_mapp.core.workspace import ScratchWorkspace


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Settings with every host path redirected under tmp_path."""
    etc = tmp_path / "etc"
    etc.mkdir()
    return InstallerSettings(
        log_file=tmp_path / "log" / "m_app_install.log",
        scratch_dir=tmp_path / "var" / "tmp" / "m_app_install",
        fstab=etc / "fstab",
        fstab_backup=etc / "fstab.m_app_install.bak",
        dvswitch_config=tmp_path / "dvswitch" / "config.php",
        internet_monitor_conf=etc / "internet-monitor.conf",
        supermon_install_dir=tmp_path / "www" / "supermon-ng",
        os_release=etc / "os-release",
        download=DownloadPolicy(backoff_seconds=0),
    )


@pytest.fixture
def context() -> InvocationContext:
    return InvocationContext(effective_uid=0, invoking_user="nodeop", interactive=False)


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def fetcher() -> MockDownloader:
    return MockDownloader()


@pytest.fixture
def services(settings, runner, fetcher) -> StepServices:
    return StepServices(
        runner=runner,
        fetcher=fetcher,
        settings=settings,
        releases=load_releases(),
        node_number=NodeNumberSource("1999"),
    )


@pytest.fixture
def workspace(settings):
    ws = ScratchWorkspace(settings.scratch_dir)
    ws.acquire()
    yield ws
    ws.release()
