# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the installer.

This module includes functions for reading the distribution identity from
os-release, resolving the user the installation is for, and choosing where
the installation log is written.
"""

import getpass
import logging
import os
import pwd
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from common.exceptions import PreconditionError
from ros2_installer.config import (
    DESKTOP_DIRNAME,
    LOG_FILENAME_TEMPLATE,
    OS_RELEASE_PATH,
)

module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OSIdentity:
    """Distribution id and release codename, e.g. ('ubuntu', 'noble')."""

    id: str
    codename: str


@dataclass(frozen=True)
class TargetUser:
    """The user whose home receives the log file and shell configuration."""

    name: str
    home: Path


def is_running_as_root() -> bool:
    return os.geteuid() == 0


def parse_os_release(content: str) -> Dict[str, str]:
    """
    Parse os-release(5) content into a dict. Values may be single or double
    quoted; comments and blank lines are ignored.
    """
    values: Dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
            value = " ".join(parts)
        except ValueError:
            value = raw_value.strip().strip("\"'")
        values[key.strip()] = value
    return values


def read_os_release(
    path: Path = OS_RELEASE_PATH,
    current_logger: Optional[logging.Logger] = None,
) -> OSIdentity:
    """
    Read the distribution identity from an os-release file.

    The codename is UBUNTU_CODENAME when present, otherwise VERSION_CODENAME.

    Raises:
        PreconditionError: The file does not exist or cannot be read.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PreconditionError(
            f"{path} could not be read: {e}", original_error=e
        ) from e

    values = parse_os_release(content)
    identity = OSIdentity(
        id=values.get("ID", ""),
        codename=values.get("UBUNTU_CODENAME")
        or values.get("VERSION_CODENAME", ""),
    )
    logger_to_use.debug(f"Read {path}: {identity}")
    return identity


def resolve_target_user(
    environ: Optional[Mapping[str, str]] = None,
) -> TargetUser:
    """
    Determine the user the installation is for, even when launched through
    sudo: SUDO_USER wins over USER, which wins over the process owner.
    """
    env = os.environ if environ is None else environ
    name = env.get("SUDO_USER") or env.get("USER") or getpass.getuser()

    try:
        home = Path(pwd.getpwnam(name).pw_dir)
    except KeyError:
        expanded = os.path.expanduser(f"~{name}")
        home = Path(expanded) if not expanded.startswith("~") else Path.home()
    return TargetUser(name=name, home=home)


def determine_log_path(target_user: TargetUser, distro: str) -> Path:
    """
    Prefer ~/Desktop/ros2_<distro>_install.log, falling back to the home
    directory itself when there is no Desktop folder.
    """
    filename = LOG_FILENAME_TEMPLATE.format(distro=distro)
    desktop_dir = target_user.home / DESKTOP_DIRNAME
    if desktop_dir.is_dir():
        return desktop_dir / filename
    return target_user.home / filename
