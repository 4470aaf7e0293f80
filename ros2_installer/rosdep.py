# ros2_installer/rosdep.py
# -*- coding: utf-8 -*-
"""
Wrapper around the rosdep command line tool.

'rosdep init' writes a system-wide sources list and fails if that list already
exists, so it may only run once per machine. 'rosdep update' refreshes the
per-user cache and is run on every installation.
"""

import logging
from pathlib import Path
from typing import Optional

from common.command_utils import run_command, run_elevated_command
from common.exceptions import StepState
from ros2_installer.config import ROSDEP_MARKER_PATH
from ros2_installer.config_models import AppSettings


class RosdepManager:
    def __init__(
        self,
        app_settings: AppSettings,
        marker_path: Path = ROSDEP_MARKER_PATH,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.marker_path = Path(marker_path)
        self.logger = logger or logging.getLogger(__name__)

    def initialization_state(self) -> StepState:
        if self.marker_path.is_file():
            return StepState.ALREADY_DONE
        return StepState.NOT_DONE

    def init(self) -> None:
        run_elevated_command(
            ["rosdep", "init"], self.app_settings, current_logger=self.logger
        )

    def update(self) -> None:
        # Runs as the invoking user: the cache lives under ~/.ros.
        run_command(
            ["rosdep", "update"], self.app_settings, current_logger=self.logger
        )
