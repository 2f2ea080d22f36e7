"""saytime-weather-rb — Ruby saytime + weather, shipped as a .deb."""

from __future__ import annotations

import logging

from asl3_mapp.core.context import InvocationContext
from asl3_mapp.core.steps.base import DebPackageStep
from asl3_mapp.core.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)


class SaytimeWeatherStep(DebPackageStep):
    name = "saytime-weather-rb"
    flag = "-y"
    description = "Install saytime-weather-rb (Ruby saytime + weather)"
    release_key = "saytime-weather-rb"

    def execute(self, context: InvocationContext, workspace: ScratchWorkspace) -> None:
        logger.info("Installing saytime-weather-rb...")
        logger.warning(
            "Do not install this alongside other saytime_weather implementations; "
            "it is a replacement."
        )
        self.install_deb(workspace)
