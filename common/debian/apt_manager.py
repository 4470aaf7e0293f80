# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
from pathlib import Path
from typing import List, Optional, Union

from common.command_utils import run_command, run_elevated_command
from common.exceptions import ExternalCommandError
from common.network_utils import download_file
from common.package_manager import PackageManager, RepositoryRegistrar
from ros2_installer.config import ROS_APT_SOURCE_DEB_PATH
from ros2_installer.config_models import AppSettings


class AptManager(PackageManager, RepositoryRegistrar):
    """
    Package management on Debian/Ubuntu through apt-get, add-apt-repository
    and dpkg. Every command runs through sudo and any failure is raised as
    ExternalCommandError.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        download_path: Path = ROS_APT_SOURCE_DEB_PATH,
    ):
        """
        Args:
            app_settings: The application settings.
            logger: An optional logging object.
            download_path: Where downloaded source packages are stored.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)
        self.download_path = Path(download_path)

    def _run(self, command: List[str]) -> None:
        run_elevated_command(
            command, self.app_settings, current_logger=self.logger
        )

    def update(self) -> None:
        """Updates the list of available packages using 'apt-get update'."""
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        self._run(["apt-get", "update", "-yq"])
        self.logger.info("Apt package lists updated successfully.")

    def is_installed(self, package: str) -> bool:
        try:
            result = run_command(
                ["dpkg-query", "-W", "-f=${db:Status-Status}", package],
                self.app_settings,
                capture_output=True,
                check=True,
                current_logger=self.logger,
            )
        except ExternalCommandError:
            return False
        return result.stdout.strip() == "installed"

    def install(
        self,
        packages: Union[List[str], str],
        update_first: bool = False,
    ) -> None:
        """
        Installs one or more packages using 'apt-get install', skipping the
        ones dpkg already reports as installed.

        Args:
            packages: A single package name or a list of package names.
            update_first: Whether to update the package lists before installing.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            self.update()

        packages_to_install = []
        for pkg_name in packages:
            if self.is_installed(pkg_name):
                self.logger.info(
                    f"Package '{pkg_name}' is already installed. Skipping."
                )
            else:
                self.logger.info(
                    f"Marking package for installation: {pkg_name}"
                )
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        self._run(["apt-get", "install", "-yq"] + packages_to_install)
        self.logger.info("Packages installed successfully.")

    def upgrade(self) -> None:
        """Upgrades all installed packages using 'apt-get upgrade'."""
        self.logger.info("Upgrading installed packages via 'apt-get upgrade'...")
        self._run(["apt-get", "upgrade", "-yq"])
        self.logger.info("Packages upgraded successfully.")

    def add_component(self, component: str) -> None:
        """Enables an archive component (e.g. 'universe')."""
        self.logger.info(f"Enabling repository component: {component}")
        self._run(["add-apt-repository", "-y", component])

    def fix_broken(self) -> None:
        """Resolves dependencies left unmet by a previous 'dpkg -i'."""
        self._run(["apt-get", "-f", "install", "-yq"])

    def install_deb(self, deb_path: Union[str, Path]) -> None:
        """Installs a local .deb with dpkg and then resolves its dependencies."""
        self.logger.info(f"Installing package file: {deb_path}")
        self._run(["dpkg", "-i", str(deb_path)])
        self.fix_broken()

    def install_source_package(self, url: str) -> None:
        """Downloads the .deb at url and installs it."""
        deb_path = download_file(
            url,
            self.download_path,
            timeout=self.app_settings.request_timeout,
            current_logger=self.logger,
        )
        self.install_deb(deb_path)
