"""
Tests for the CLI entrypoint — flag parsing, guard order, exit codes.
"""

import logging
import os

import click
import pytest
from click.testing import CliRunner

from asl3_mapp import __version__
from asl3_mapp.core.config.settings import InstallerSettings
from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.errors import PrivilegeError
from asl3_mapp.core.models import RunReport, StepOutcome
from asl3_mapp.core.privilege import INVOCATION_HINT
from asl3_mapp.core.use_cases.install import InstallResult
from asl3_mapp.main import cli


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli_settings(monkeypatch, settings):
    monkeypatch.setattr(
        InstallerSettings, "from_env", classmethod(lambda cls, environ=None: settings)
    )
    return settings


@pytest.fixture
def as_sudo(monkeypatch):
    context = InvocationContext(effective_uid=0, invoking_user="nodeop", interactive=False)
    monkeypatch.setattr("asl3_mapp.core.privilege.validate", lambda **kw: context)
    return context


class FakeInstall(list):
    """Stands in for run_install; records each call."""

    def __init__(self):
        super().__init__()
        self.result = InstallResult(report=RunReport())

    def __call__(self, selected, context, **kwargs):
        self.append({"selected": selected, "context": context, **kwargs})
        return self.result


@pytest.fixture
def fake_install(monkeypatch):
    fake = FakeInstall()
    monkeypatch.setattr("asl3_mapp.core.use_cases.install.run_install", fake)
    return fake


class TestUsage:
    def test_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0
        for flag in ("-a", "-d", "-s", "-w", "-y", "-i", "-m"):
            assert flag in result.output

    def test_no_flags_prints_usage(self):
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 1
        assert "Usage:" in result.output

    def test_unknown_option(self):
        result = CliRunner().invoke(cli, ["-z"])
        assert result.exit_code == 2

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


@pytest.fixture
def deny_sudo(monkeypatch):
    def _deny(**kw):
        raise PrivilegeError(INVOCATION_HINT)

    monkeypatch.setattr("asl3_mapp.core.privilege.validate", _deny)


class TestGuard:
    def test_rejected_without_sudo(self, monkeypatch, cli_settings, deny_sudo, fake_install):
        monkeypatch.setattr(os, "geteuid", lambda: 1000)

        result = CliRunner().invoke(cli, ["-a"])

        assert result.exit_code == 1
        assert "must be run with sudo" in result.output
        assert fake_install == []
        assert not cli_settings.log_file.exists()

    def test_root_login_rejection_reaches_log_file(
        self, monkeypatch, cli_settings, deny_sudo, fake_install
    ):
        monkeypatch.setattr(os, "geteuid", lambda: 0)

        result = CliRunner().invoke(cli, ["-a"])

        assert result.exit_code == 1
        assert fake_install == []
        log = cli_settings.log_file.read_text()
        assert "[ERROR] This script must be run with sudo" in log


class TestRun:
    def test_selected_steps_in_fixed_order(self, cli_settings, as_sudo, fake_install):
        result = CliRunner().invoke(cli, ["-m", "-a", "-s"])

        assert result.exit_code == 0
        assert fake_install[0]["selected"] == ["allscan", "supermon-ng", "internet-monitor"]
        assert fake_install[0]["context"] is as_sudo
        assert fake_install[0]["settings"] is cli_settings
        assert cli_settings.log_file.exists()

    def test_node_number_option(self, cli_settings, as_sudo, fake_install):
        result = CliRunner().invoke(cli, ["-i", "--node-number", "1999"])
        assert result.exit_code == 0
        assert fake_install[0]["node_number"].get() == "1999"

    def test_invalid_node_number(self, cli_settings, as_sudo, fake_install):
        result = CliRunner().invoke(cli, ["-i", "--node-number", "abc"])
        assert result.exit_code == 1
        assert "digits only" in result.output
        assert fake_install == []

    def test_step_failure_exit_code(self, cli_settings, as_sudo, fake_install):
        report = RunReport(outcomes=[StepOutcome.failure("allscan", "boom")])
        fake_install.result = InstallResult(report=report, error="boom")

        result = CliRunner().invoke(cli, ["-a"])

        assert result.exit_code == 1

    def test_interrupt_exit_code(self, monkeypatch, cli_settings, as_sudo):
        def _interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("asl3_mapp.core.use_cases.install.run_install", _interrupted)

        result = CliRunner().invoke(cli, ["-a"])

        assert result.exit_code == 130
        assert "Interrupted." in result.output
        assert "workspace removed" not in result.output

    def test_aborted_prompt_is_interrupt(self, monkeypatch, cli_settings, as_sudo):
        def _aborted(*args, **kwargs):
            raise click.Abort()

        monkeypatch.setattr("asl3_mapp.core.use_cases.install.run_install", _aborted)

        result = CliRunner().invoke(cli, ["-i"])

        assert result.exit_code == 130
        assert "Interrupted." in result.output

    def test_unexpected_error_is_logged(self, monkeypatch, cli_settings, as_sudo):
        def _broken(*args, **kwargs):
            raise PermissionError(13, "Permission denied", "/etc/fstab")

        monkeypatch.setattr("asl3_mapp.core.use_cases.install.run_install", _broken)

        result = CliRunner().invoke(cli, ["-a"])

        assert result.exit_code == 1
        assert "[ERROR] Installation aborted:" in result.output
        assert "Installation aborted:" in cli_settings.log_file.read_text()
