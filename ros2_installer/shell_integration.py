# ros2_installer/shell_integration.py
# -*- coding: utf-8 -*-
"""
Adds the ROS 2 environment setup line to the user's shell startup file.

The decision of what the file should contain is a pure function of the current
content and the line, so it can be tested without touching a filesystem.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from common.command_utils import log_installer
from common.exceptions import InstallerError, StepState
from ros2_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class ShellRcAction(Enum):
    CREATED = "created"
    APPENDED = "appended"
    ALREADY_PRESENT = "already_present"


@dataclass(frozen=True)
class ShellRcUpdate:
    action: ShellRcAction
    content: str


def shell_rc_state(existing_content: Optional[str], setup_line: str) -> StepState:
    """ALREADY_DONE when setup_line occurs verbatim anywhere in the content."""
    if existing_content is not None and setup_line in existing_content:
        return StepState.ALREADY_DONE
    return StepState.NOT_DONE


def plan_shell_rc_update(
    existing_content: Optional[str], setup_line: str, distro: str
) -> ShellRcUpdate:
    """
    Work out the new content of a shell startup file.

    Args:
        existing_content: Current file content, or None if the file is absent.
        setup_line: The line that must be present, e.g.
            "source /opt/ros/kilted/setup.bash".
        distro: ROS distro name used in the comment above the line.

    Returns:
        CREATED with just the line when the file is absent, APPENDED with the
        original content followed by a blank line, a comment and the line, or
        ALREADY_PRESENT with the content unchanged.
    """
    if existing_content is None:
        return ShellRcUpdate(ShellRcAction.CREATED, f"{setup_line}\n")

    if shell_rc_state(existing_content, setup_line) is StepState.ALREADY_DONE:
        return ShellRcUpdate(ShellRcAction.ALREADY_PRESENT, existing_content)

    base = existing_content
    if base and not base.endswith("\n"):
        base += "\n"
    addition = f"\n# ROS 2 {distro}\n{setup_line}\n"
    return ShellRcUpdate(ShellRcAction.APPENDED, base + addition)


def _read_if_exists(path: Path) -> Optional[str]:
    # newline="" and surrogateescape keep the original bytes intact.
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None


def configure_shell_environment(
    rc_path: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> ShellRcAction:
    """
    Ensure rc_path sources the ROS 2 setup script, writing the file only
    when its content has to change.

    Raises:
        InstallerError: rc_path cannot be read or written, e.g. it is a
            directory or owned by root.
    """
    logger_to_use = current_logger if current_logger else module_logger
    rc_path = Path(rc_path)

    try:
        existing_content = _read_if_exists(rc_path)
    except OSError as e:
        raise InstallerError(
            f"Could not read {rc_path}: {e}", original_error=e
        ) from e
    update = plan_shell_rc_update(
        existing_content,
        app_settings.setup_line,
        app_settings.ros_distro,
    )

    if update.action is ShellRcAction.ALREADY_PRESENT:
        log_installer(
            f"ROS 2 setup sourcing already present in {rc_path}.",
            "info",
            logger_to_use,
            app_settings,
        )
        return update.action

    if update.action is ShellRcAction.CREATED:
        mode, text = "w", update.content
        message = f"Created {rc_path} and added ROS 2 setup sourcing."
    else:
        mode, text = "a", update.content[len(existing_content or ""):]
        message = f"Added ROS 2 setup sourcing to {rc_path}."
    try:
        with open(rc_path, mode, encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(text)
    except OSError as e:
        raise InstallerError(
            f"Could not write {rc_path}: {e}. Add '{app_settings.setup_line}' to it manually.",
            original_error=e,
        ) from e
    log_installer(message, "success", logger_to_use, app_settings)
    return update.action
