"""
Engine executor — run the selected steps, one at a time, in order.

Flow per step:
    probe (is_already_satisfied) → skip notice   or   execute → outcome

The first failing step halts the run: later steps are never invoked
and get no outcome.  ``InstallerError`` and ``OSError`` are step
failures; anything else is a bug and propagates to the caller (whose
workspace teardown still runs).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.errors import InstallerError, StepError
from asl3_mapp.core.models.outcome import RunReport, StepOutcome
from asl3_mapp.core.steps.base import InstallStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


def execute_step(
    step: InstallStep,
    context: InvocationContext,
    workspace: ScratchWorkspace,
) -> StepOutcome:
    """Run one step and describe what happened.

    Installer errors and host I/O errors (``OSError``) become a failed
    outcome; anything else propagates.
    """
    start = time.monotonic()

    try:
        if step.is_already_satisfied():
            logger.info("%s is already installed; skipping installation.", step.name)
            return StepOutcome.skip(step.name, "already installed")

        step.execute(context, workspace)
    except InstallerError as e:
        logger.error("%s", e)
        return StepOutcome.failure(step.name, str(e), duration_ms=_elapsed(start))
    except OSError as e:
        error = StepError(f"{step.name}: {e}")
        logger.error("%s", error)
        return StepOutcome.failure(step.name, str(error), duration_ms=_elapsed(start))

    return StepOutcome.success(step.name, duration_ms=_elapsed(start))


def execute_steps(
    steps: Sequence[InstallStep],
    context: InvocationContext,
    workspace: ScratchWorkspace,
) -> RunReport:
    """Execute ``steps`` in order, stopping at the first failure."""
    report = RunReport()

    for step in steps:
        logger.debug("Starting step %s", step.name)
        outcome = execute_step(step, context, workspace)
        report.add(outcome)
        if outcome.failed:
            logger.debug("Step %s failed; remaining steps not attempted", step.name)
            break

    return report


def _elapsed(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
