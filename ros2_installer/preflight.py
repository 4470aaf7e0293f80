# ros2_installer/preflight.py
# -*- coding: utf-8 -*-
"""
Checks that must pass before the installer touches the system.

ROS 2 Kilted deb packages are published for one Ubuntu release only, so the
installer stops before any apt call on anything else.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from common.exceptions import PreconditionError
from common.system_utils import OSIdentity, is_running_as_root, read_os_release
from ros2_installer.config import OS_RELEASE_PATH
from ros2_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def ensure_not_root(euid: Optional[int] = None) -> None:
    """
    Refuse to run as root: ~/.bashrc and rosdep's user cache must belong to
    the invoking user. Commands that need root are run through sudo.
    """
    running_as_root = is_running_as_root() if euid is None else euid == 0
    if running_as_root:
        raise PreconditionError(
            "Do not run this script with sudo or as root. Run it as your "
            "normal user so ~/.bashrc and rosdep are configured correctly."
        )


def verify_os_support(identity: OSIdentity, app_settings: AppSettings) -> None:
    """Raise PreconditionError unless identity matches the supported release."""
    expected_id = app_settings.supported_os_id
    expected_codename = app_settings.supported_codename

    if identity.id != expected_id:
        raise PreconditionError(
            f"Detected ID='{identity.id or 'unknown'}'. This script is intended "
            f"for {expected_id} ({expected_codename}) only."
        )

    if identity.codename != expected_codename:
        raise PreconditionError(
            f"Detected {expected_id} codename '{identity.codename}'. "
            f"ROS 2 {app_settings.ros_distro} deb packages are published for "
            f"{expected_id} '{expected_codename}' only. Either upgrade to that "
            f"release or install a ROS 2 distro supported on yours."
        )


def verify_os_step(
    context: Dict[str, Any],
    app_settings: AppSettings,
    os_release_path: Path = OS_RELEASE_PATH,
    current_logger: Optional[logging.Logger] = None,
) -> OSIdentity:
    """
    Read os-release, verify it, and store the identity in the shared context
    under "os_identity" for later steps.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        identity = read_os_release(os_release_path, logger_to_use)
    except PreconditionError as e:
        raise PreconditionError(
            f"{os_release_path} not found or unreadable. This script supports "
            f"{app_settings.supported_os_id} ({app_settings.supported_codename}) only.",
            original_error=e,
        ) from e

    verify_os_support(identity, app_settings)
    logger_to_use.info(
        f"Detected supported OS: {identity.id} {identity.codename}"
    )
    context["os_identity"] = identity
    return identity
