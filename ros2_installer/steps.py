# ros2_installer/steps.py
# -*- coding: utf-8 -*-
"""
The provisioning steps run by the installer, in order.

Each step receives the collaborators it needs (package manager, repository
registrar, rosdep wrapper) plus the orchestrator's shared context and the
application settings. Failures are raised, never returned.
"""

import logging
import os
from typing import Any, Callable, Dict, MutableMapping, Optional

from common.command_utils import log_installer, run_elevated_command
from common.exceptions import ConfigurationError, StepState
from common.network_utils import build_apt_source_url, fetch_latest_release_tag
from common.package_manager import PackageManager, RepositoryRegistrar
from common.system_utils import TargetUser
from ros2_installer import config as static_config
from ros2_installer.config_models import AppSettings
from ros2_installer.rosdep import RosdepManager
from ros2_installer.shell_integration import (
    ShellRcAction,
    configure_shell_environment,
)

module_logger = logging.getLogger(__name__)


def select_metapackage(distro: str, variant: str) -> str:
    """
    Map a variant to its metapackage, e.g. ('kilted', 'desktop') ->
    'ros-kilted-desktop'. 'base' is accepted as an alias of 'ros-base'.

    Raises:
        ConfigurationError: variant is not a recognised value.
    """
    suffix = static_config.VARIANT_METAPACKAGE_SUFFIXES.get(variant)
    if suffix is None:
        raise ConfigurationError(
            f"Unknown ROS_VARIANT='{variant}'. Use 'desktop' or 'ros-base'."
        )
    return f"ros-{distro}-{suffix}"


def configure_locale(
    package_manager: PackageManager,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> None:
    """Install, generate and activate the UTF-8 locale."""
    logger_to_use = current_logger if current_logger else module_logger
    locale = app_settings.locale
    language = locale.split(".", 1)[0]

    package_manager.update()
    package_manager.install(static_config.LOCALE_PACKAGES)
    run_elevated_command(
        ["locale-gen", language, locale],
        app_settings,
        current_logger=logger_to_use,
    )
    run_elevated_command(
        ["update-locale", f"LC_ALL={locale}", f"LANG={locale}"],
        app_settings,
        current_logger=logger_to_use,
    )
    # Child processes of this run inherit it.
    target_env = os.environ if environ is None else environ
    target_env["LANG"] = locale


def enable_universe_repository(
    package_manager: PackageManager,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    package_manager.install(static_config.REPOSITORY_TOOL_PACKAGES)
    package_manager.add_component("universe")
    package_manager.update()


def install_ros_apt_source(
    registrar: RepositoryRegistrar,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    fetch_tag: Optional[Callable[..., str]] = None,
) -> str:
    """
    Install the ros2-apt-source package of the latest release, which sets up
    the ROS apt repository and its signing key.

    Returns:
        The release tag that was installed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    identity = context.get("os_identity")
    codename = identity.codename if identity else app_settings.supported_codename
    if fetch_tag is None:
        fetch_tag = fetch_latest_release_tag

    tag = fetch_tag(
        app_settings.ros_apt_source_repo,
        api_url=app_settings.github_api_url,
        timeout=app_settings.request_timeout,
        current_logger=logger_to_use,
    )
    url = build_apt_source_url(
        app_settings.github_download_url,
        app_settings.ros_apt_source_repo,
        tag,
        codename,
    )
    log_installer(
        f"{app_settings.symbols.get('package', '📦')} Downloading: {url}",
        "info",
        logger_to_use,
        app_settings,
    )
    registrar.install_source_package(url)
    context["ros_apt_source_version"] = tag
    return tag


def update_and_upgrade(
    package_manager: PackageManager,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Refresh apt indexes, then upgrade unless skip_upgrade is set.

    Returns:
        True if the upgrade ran.
    """
    logger_to_use = current_logger if current_logger else module_logger
    package_manager.update()
    if app_settings.skip_upgrade:
        log_installer(
            "SKIP_UPGRADE set; skipping 'apt-get upgrade'.",
            "info",
            logger_to_use,
            app_settings,
        )
        return False
    package_manager.upgrade()
    return True


def install_ros_packages(
    package_manager: PackageManager,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """Install the variant metapackage, the build tooling and, optionally, ros-dev-tools."""
    metapackage = select_metapackage(
        app_settings.ros_distro, app_settings.ros_variant
    )
    package_manager.install([metapackage])
    package_manager.install(list(static_config.ROS_TOOLING_PACKAGES))
    if app_settings.install_dev_tools:
        package_manager.install([static_config.ROS_DEV_TOOLS_PACKAGE])
    return metapackage


def initialize_rosdep(
    rosdep: RosdepManager,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> StepState:
    """
    Run 'rosdep init' once per machine and 'rosdep update' every time.

    Returns:
        The initialization state found before anything ran.
    """
    logger_to_use = current_logger if current_logger else module_logger
    state = rosdep.initialization_state()
    if state is StepState.NOT_DONE:
        rosdep.init()
    else:
        log_installer(
            "rosdep already initialized; skipping 'rosdep init'.",
            "info",
            logger_to_use,
            app_settings,
        )
    rosdep.update()
    return state


def configure_shell(
    target_user: TargetUser,
    context: Dict[str, Any],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> ShellRcAction:
    rc_path = target_user.home / static_config.SHELL_RC_FILENAME
    return configure_shell_environment(rc_path, app_settings, current_logger)


def log_completion(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    lines = [
        f"{symbols.get('sparkles', '✨')} === ROS 2 {app_settings.ros_distro} installation complete ===",
        "Open a new terminal or run:",
        f"  {app_settings.setup_line}",
        "Quick test (in two terminals):",
    ]
    lines.extend(f"  {command}" for command in static_config.QUICK_TEST_COMMANDS)
    for line in lines:
        logger_to_use.info(line)
