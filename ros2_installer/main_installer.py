# ros2_installer/main_installer.py
# -*- coding: utf-8 -*-
"""
Entry point for the ROS 2 installer.

Runs the precondition checks, sets up logging to the console and to a log
file in the target user's home, then runs the provisioning steps in order.
Every InstallerError ends up in main(), which logs it and returns exit code 1.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from common.core_utils import setup_logging
from common.debian.apt_manager import AptManager
from common.exceptions import InstallerError
from common.orchestrator import Orchestrator
from common.package_manager import PackageManager, RepositoryRegistrar
from common.system_utils import (
    TargetUser,
    determine_log_path,
    resolve_target_user,
)
from ros2_installer import __version__
from ros2_installer.config import OS_RELEASE_PATH
from ros2_installer.config_loader import DEFAULT_CONFIG_FILE, load_app_settings
from ros2_installer.config_models import AppSettings
from ros2_installer.preflight import ensure_not_root, verify_os_step
from ros2_installer.rosdep import RosdepManager
from ros2_installer.steps import (
    configure_locale,
    configure_shell,
    enable_universe_repository,
    initialize_rosdep,
    install_ros_apt_source,
    install_ros_packages,
    log_completion,
    update_and_upgrade,
)

logger = logging.getLogger("ros2_installer")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Install ROS 2 Kilted Kaiju on Ubuntu 24.04 (Noble).",
        epilog="Environment: ROS_VARIANT=desktop|ros-base, "
        "INSTALL_DEV_TOOLS=1|0, SKIP_UPGRADE=1|0.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config-file",
        default=DEFAULT_CONFIG_FILE,
        help="Optional YAML file with setting overrides.",
    )
    parser.add_argument(
        "--variant",
        choices=["desktop", "ros-base", "base"],
        default=None,
        help="ROS 2 variant to install (overrides ROS_VARIANT).",
    )
    parser.add_argument(
        "--skip-upgrade",
        action="store_true",
        help="Do not run 'apt-get upgrade' (overrides SKIP_UPGRADE).",
    )
    parser.add_argument(
        "--no-dev-tools",
        action="store_true",
        help="Do not install ros-dev-tools (overrides INSTALL_DEV_TOOLS).",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(args)


def view_configuration(app_settings: AppSettings) -> str:
    """Render the effective configuration as text."""
    symbols = app_settings.symbols
    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  ROS distro:                {app_settings.ros_distro}\n"
    config_text += f"  ROS variant:               {app_settings.ros_variant}\n"
    config_text += f"  Install ros-dev-tools:     {app_settings.install_dev_tools}\n"
    config_text += f"  Skip apt-get upgrade:      {app_settings.skip_upgrade}\n"
    config_text += f"  Supported OS:              {app_settings.supported_os_id} {app_settings.supported_codename}\n"
    config_text += f"  Locale:                    {app_settings.locale}\n"
    config_text += f"  ros-apt-source repository: {app_settings.ros_apt_source_repo}\n"
    config_text += f"  Shell setup line:          {app_settings.setup_line}\n"
    return config_text


def build_orchestrator(
    app_settings: AppSettings,
    package_manager: PackageManager,
    registrar: RepositoryRegistrar,
    rosdep: RosdepManager,
    target_user: TargetUser,
    current_logger: Optional[logging.Logger] = None,
    os_release_path: Path = OS_RELEASE_PATH,
) -> Orchestrator:
    """Queue the installation steps in the order they must run."""
    logger_to_use = current_logger if current_logger else logger
    common_kwargs = {"current_logger": logger_to_use}
    distro = app_settings.ros_distro

    orchestrator = Orchestrator(app_settings, logger_to_use)
    orchestrator.add_task(
        "Verifying OS support",
        verify_os_step,
        kwargs={**common_kwargs, "os_release_path": os_release_path},
    )
    orchestrator.add_task(
        "Setting locale (UTF-8)",
        configure_locale,
        [package_manager],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        "Enabling Ubuntu Universe repository",
        enable_universe_repository,
        [package_manager],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        "Installing ROS 2 apt sources (ros2-apt-source)",
        install_ros_apt_source,
        [registrar],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        "Updating apt caches and upgrading",
        update_and_upgrade,
        [package_manager],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        f"Installing ROS 2 {distro} ({app_settings.ros_variant}) and common tooling",
        install_ros_packages,
        [package_manager],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        "Initializing rosdep and updating indexes",
        initialize_rosdep,
        [rosdep],
        dict(common_kwargs),
    )
    orchestrator.add_task(
        "Configuring shell environment",
        configure_shell,
        [target_user],
        dict(common_kwargs),
        numbered=False,
    )
    return orchestrator


def main(args: Optional[List[str]] = None) -> int:
    parsed_args = parse_args(args)
    log_level = logging.DEBUG if parsed_args.verbose else logging.INFO

    # Console only until the target user's log file is known.
    setup_logging(log_level=log_level, log_format_str="%(message)s")

    try:
        ensure_not_root()
        app_settings = load_app_settings(
            parsed_args, parsed_args.config_file, logger
        )

        if parsed_args.show_config:
            print(view_configuration(app_settings))
            return EXIT_OK

        target_user = resolve_target_user()
        log_path = determine_log_path(target_user, app_settings.ros_distro)
        setup_logging(
            log_level=log_level,
            log_file=log_path,
            log_prefix=app_settings.log_prefix,
            symbols=app_settings.symbols,
        )
        logger.info(
            f"=== ROS 2 {app_settings.ros_distro} installer starting ==="
        )
        logger.info(f"Log: {log_path}")

        apt_manager = AptManager(app_settings, logger)
        rosdep = RosdepManager(app_settings, logger=logger)
        orchestrator = build_orchestrator(
            app_settings, apt_manager, apt_manager, rosdep, target_user, logger
        )
        orchestrator.run()
        log_completion(app_settings, logger)
        return EXIT_OK
    except InstallerError as e:
        logger.error(f"Installation aborted: {e.message}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("Installation interrupted by user.")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
