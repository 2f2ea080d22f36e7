"""
Install steps — re-exports::

    from asl3_mapp.core.steps import STEP_ORDER, build_steps, InstallStep
"""

from asl3_mapp.core.steps.base import ArchiveStep, DebPackageStep, InstallStep, StepServices
from asl3_mapp.core.steps.node import NodeNumberSource
from asl3_mapp.core.steps.registry import STEP_NAMES, STEP_ORDER, build_steps

__all__ = [
    "ArchiveStep",
    "DebPackageStep",
    "InstallStep",
    "NodeNumberSource",
    "STEP_NAMES",
    "STEP_ORDER",
    "StepServices",
    "build_steps",
]
