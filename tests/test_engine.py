"""
Tests for the step executor and the outcome report.
"""

import logging

import pytest

from asl3_mapp.core.engine.executor import execute_step, execute_steps
from asl3_mapp.core.errors import StepError
from asl3_mapp.core.models import RunReport, StepOutcome
from asl3_mapp.core.steps.base import InstallStep


class FakeStep(InstallStep):
    """Step that records its calls and behaves as configured."""

    def __init__(self, services, name, *, satisfied=False, error=None, calls=None):
        super().__init__(services)
        self.name = name
        self.satisfied = satisfied
        self.error = error
        self.calls = calls if calls is not None else []

    def is_already_satisfied(self):
        return self.satisfied

    def execute(self, context, workspace):
        self.calls.append(self.name)
        if self.error:
            raise self.error


class TestExecuteStep:
    def test_success(self, services, context, workspace):
        outcome = execute_step(FakeStep(services, "one"), context, workspace)
        assert outcome.ok
        assert outcome.step == "one"

    def test_skip_does_not_execute(self, services, context, workspace, caplog):
        step = FakeStep(services, "one", satisfied=True)
        with caplog.at_level(logging.INFO):
            outcome = execute_step(step, context, workspace)
        assert outcome.status == "skipped"
        assert step.calls == []
        assert "one is already installed; skipping installation." in caplog.text

    def test_installer_error_becomes_failure(self, services, context, workspace, caplog):
        step = FakeStep(services, "one", error=StepError("nope"))
        with caplog.at_level(logging.ERROR):
            outcome = execute_step(step, context, workspace)
        assert outcome.failed
        assert outcome.error == "nope"
        assert "nope" in caplog.text

    def test_unexpected_error_propagates(self, services, context, workspace):
        step = FakeStep(services, "one", error=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            execute_step(step, context, workspace)


class TestExecuteSteps:
    def test_runs_all_in_order(self, services, context, workspace):
        calls = []
        steps = [FakeStep(services, n, calls=calls) for n in ("a", "b", "c")]
        report = execute_steps(steps, context, workspace)
        assert calls == ["a", "b", "c"]
        assert report.all_ok
        assert report.succeeded == 3

    def test_failure_halts_remaining(self, services, context, workspace):
        calls = []
        steps = [
            FakeStep(services, "a", calls=calls),
            FakeStep(services, "b", calls=calls, error=StepError("broken")),
            FakeStep(services, "c", calls=calls),
        ]
        report = execute_steps(steps, context, workspace)
        assert calls == ["a", "b"]
        assert report.steps_run == ["a", "b"]
        assert report.failed == 1
        assert not report.all_ok

    def test_skip_continues(self, services, context, workspace):
        calls = []
        steps = [
            FakeStep(services, "a", calls=calls, satisfied=True),
            FakeStep(services, "b", calls=calls),
        ]
        report = execute_steps(steps, context, workspace)
        assert calls == ["b"]
        assert (report.skipped, report.succeeded) == (1, 1)


class TestRunReport:
    def test_to_dict(self):
        report = RunReport()
        report.add(StepOutcome.success("a"))
        report.add(StepOutcome.skip("b", "already installed"))
        report.add(StepOutcome.failure("c", "boom"))
        data = report.to_dict()
        assert data["status"] == "failed"
        assert (data["succeeded"], data["skipped"], data["failed"]) == (1, 1, 1)
        assert [o["status"] for o in data["outcomes"]] == ["ok", "skipped", "failed"]
        assert data["outcomes"][2]["error"] == "boom"

    def test_empty_is_ok(self):
        assert RunReport().all_ok


class TestHostErrors:
    def test_os_error_becomes_logged_failure(self, services, context, workspace, caplog):
        step = FakeStep(services, "one", error=PermissionError(13, "Permission denied"))
        with caplog.at_level(logging.ERROR):
            outcome = execute_step(step, context, workspace)
        assert outcome.failed
        assert outcome.error.startswith("one: ")
        assert "Permission denied" in outcome.error
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_os_error_halts_remaining(self, services, context, workspace):
        calls = []
        steps = [
            FakeStep(services, "a", calls=calls, error=FileExistsError(17, "File exists")),
            FakeStep(services, "b", calls=calls),
        ]
        report = execute_steps(steps, context, workspace)
        assert calls == ["a"]
        assert report.failed == 1
