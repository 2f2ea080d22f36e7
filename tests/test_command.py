"""
Tests for the command runner and the mock runner.
"""

from asl3_mapp.adapters.base import CommandResult
from asl3_mapp.adapters.mock import MockCommandRunner
from asl3_mapp.adapters.shell.command import CommandRunner


class TestCommandRunnerCaptured:
    def test_success_captures_stdout(self):
        result = CommandRunner().run_captured(["sh", "-c", "echo hello"])
        assert result.ok
        assert result.returncode == 0
        assert result.stdout.strip() == "hello"

    def test_failure_captures_stderr(self):
        result = CommandRunner().run_captured(["sh", "-c", "echo broken >&2; exit 3"])
        assert not result.ok
        assert result.returncode == 3
        assert result.stderr == "broken"
        assert result.detail == "broken"

    def test_missing_program_does_not_raise(self):
        result = CommandRunner().run_captured(["definitely-not-a-real-binary-xyz"])
        assert not result.ok
        assert result.returncode is None
        assert "Command execution error" in result.error

    def test_never_waits_on_stdin(self):
        # cat would block forever on an inherited terminal
        result = CommandRunner(timeout=10).run_captured(["cat"])
        assert result.ok
        assert result.stdout == ""

    def test_timeout(self):
        result = CommandRunner(timeout=0.2).run_captured(["sleep", "5"])
        assert not result.ok
        assert "timed out" in result.error

    def test_cwd_and_env(self, tmp_path):
        result = CommandRunner().run_captured(
            ["sh", "-c", 'echo "$PWD:$NODE_NUMBER"'],
            cwd=tmp_path,
            env={"NODE_NUMBER": "1999"},
        )
        assert result.stdout.strip() == f"{tmp_path}:1999"

    def test_arguments_are_not_shell_interpreted(self, tmp_path):
        result = CommandRunner().run_captured(["echo", "$(touch pwned); `id`"], cwd=tmp_path)
        assert result.stdout.strip() == "$(touch pwned); `id`"
        assert not (tmp_path / "pwned").exists()


class TestCommandRunnerInteractive:
    def test_reports_exit_status(self):
        assert CommandRunner().run_interactive(["true"]).ok
        result = CommandRunner().run_interactive(["false"])
        assert not result.ok
        assert result.interactive

    def test_missing_program(self):
        result = CommandRunner().run_interactive(["definitely-not-a-real-binary-xyz"])
        assert not result.ok


class TestMockCommandRunner:
    def test_default_success(self):
        runner = MockCommandRunner()
        assert runner.run_captured(["apt", "update"]).ok
        assert runner.commands == [["apt", "update"]]

    def test_longest_prefix_wins(self):
        runner = MockCommandRunner()
        runner.set_failure(["systemctl"])
        runner.set_response(
            ["systemctl", "enable"], CommandResult(command=[], returncode=0, stdout="enabled")
        )
        assert runner.run_captured(["systemctl", "enable", "x"]).stdout == "enabled"
        assert not runner.run_captured(["systemctl", "start", "x"]).ok

    def test_call_log(self, tmp_path):
        runner = MockCommandRunner()
        runner.run_interactive(["php", "x.php"], cwd=tmp_path, env={"A": "1"})
        call = runner.call_log[0]
        assert call.interactive
        assert call.cwd == str(tmp_path)
        assert call.env == {"A": "1"}

    def test_reset(self):
        runner = MockCommandRunner()
        runner.set_failure(["false"])
        runner.run_captured(["false"])
        runner.reset()
        assert runner.call_count == 0
        assert runner.run_captured(["false"]).ok
