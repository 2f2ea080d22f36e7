"""
Step registry — the closed set of install steps, in execution order.

Steps always run in ``STEP_ORDER``, whatever order the flags were
given on the command line.
"""

from __future__ import annotations

from collections.abc import Iterable

from asl3_mapp.core.steps.allscan import AllScanStep
from asl3_mapp.core.steps.base import InstallStep, StepServices
from asl3_mapp.core.steps.dvswitch import DVSwitchStep
from asl3_mapp.core.steps.internet_monitor import InternetMonitorStep
from asl3_mapp.core.steps.sayip import SayIPNodeUtilsStep
from asl3_mapp.core.steps.saytime import SaytimeWeatherStep
from asl3_mapp.core.steps.skywarnplus import SkywarnPlusNGStep
from asl3_mapp.core.steps.supermon import SupermonNGStep

STEP_ORDER: tuple[type[InstallStep], ...] = (
    AllScanStep,
    DVSwitchStep,
    SupermonNGStep,
    SkywarnPlusNGStep,
    SaytimeWeatherStep,
    SayIPNodeUtilsStep,
    InternetMonitorStep,
)

STEP_NAMES: tuple[str, ...] = tuple(cls.name for cls in STEP_ORDER)


def build_steps(selected: Iterable[str], services: StepServices) -> list[InstallStep]:
    """Instantiate the selected steps in registry order.

    Raises:
        KeyError: An unknown step name was selected.
    """
    wanted = set(selected)
    unknown = wanted.difference(STEP_NAMES)
    if unknown:
        raise KeyError(f"Unknown step(s): {', '.join(sorted(unknown))}")
    return [cls(services) for cls in STEP_ORDER if cls.name in wanted]
