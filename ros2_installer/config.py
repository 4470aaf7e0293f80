# ros2_installer/config.py
"""
Static constants for the ROS 2 installer.

Values here are not meant to be overridden at run time. Anything a user may
want to change lives in config_models.AppSettings instead.
"""

from pathlib import Path

OS_RELEASE_PATH: Path = Path("/etc/os-release")

# Written by 'rosdep init'; its presence means the index is initialized.
ROSDEP_MARKER_PATH: Path = Path(
    "/etc/ros/rosdep/sources.list.d/20-default.list"
)

ROS_APT_SOURCE_DEB_PATH: Path = Path("/tmp/ros2-apt-source.deb")

SHELL_RC_FILENAME: str = ".bashrc"
DESKTOP_DIRNAME: str = "Desktop"
LOG_FILENAME_TEMPLATE: str = "ros2_{distro}_install.log"

# --- Package Lists (for apt installation) ---
LOCALE_PACKAGES: list[str] = ["locales"]

REPOSITORY_TOOL_PACKAGES: list[str] = ["software-properties-common"]

ROS_TOOLING_PACKAGES: list[str] = [
    "python3-rosdep",
    "python3-colcon-common-extensions",
    "python3-argcomplete",
    "python3-vcstool",
    "build-essential",
]

ROS_DEV_TOOLS_PACKAGE: str = "ros-dev-tools"

# Variant names accepted on the command line / environment, mapped to the
# suffix of the ros-<distro>-<suffix> metapackage.
VARIANT_METAPACKAGE_SUFFIXES: dict[str, str] = {
    "desktop": "desktop",
    "ros-base": "ros-base",
    "base": "ros-base",
}

QUICK_TEST_COMMANDS: list[str] = [
    "ros2 run demo_nodes_cpp talker",
    "ros2 run demo_nodes_py listener",
]
