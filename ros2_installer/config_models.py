# ros2_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions. The three user-facing toggles
keep the environment variable names documented for the installer
(ROS_VARIANT, INSTALL_DEV_TOOLS, SKIP_UPGRADE); every other field can be set
through a ROS2_INSTALLER_ prefixed variable.
"""

from typing import Dict

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ros2_installer.config import VARIANT_METAPACKAGE_SUFFIXES

# --- Default Static Values (can be overridden by config file/env/cli) ---
ROS_DISTRO_DEFAULT: str = "kilted"
ROS_VARIANT_DEFAULT: str = "desktop"
SUPPORTED_OS_ID_DEFAULT: str = "ubuntu"
SUPPORTED_CODENAME_DEFAULT: str = "noble"
LOCALE_DEFAULT: str = "en_US.UTF-8"
ROS_APT_SOURCE_REPO_DEFAULT: str = "ros-infrastructure/ros-apt-source"
GITHUB_API_URL_DEFAULT: str = "https://api.github.com"
GITHUB_DOWNLOAD_URL_DEFAULT: str = "https://github.com"
REQUEST_TIMEOUT_DEFAULT: int = 60
LOG_PREFIX_DEFAULT: str = "[ROS2-SETUP]"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛",
}


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_prefix="ROS2_INSTALLER_",
        env_ignore_empty=True,
        extra="ignore",
    )

    ros_variant: str = Field(
        default=ROS_VARIANT_DEFAULT,
        validation_alias=AliasChoices("ros_variant", "ROS_VARIANT"),
        description="ROS 2 variant to install: 'desktop' or 'ros-base'.",
    )
    install_dev_tools: bool = Field(
        default=True,
        validation_alias=AliasChoices("install_dev_tools", "INSTALL_DEV_TOOLS"),
        description="Also install the ros-dev-tools package.",
    )
    skip_upgrade: bool = Field(
        default=False,
        validation_alias=AliasChoices("skip_upgrade", "SKIP_UPGRADE"),
        description="Skip 'apt-get upgrade' after the ROS sources are added.",
    )

    ros_distro: str = Field(default=ROS_DISTRO_DEFAULT, description="ROS 2 distribution codename.")
    supported_os_id: str = Field(default=SUPPORTED_OS_ID_DEFAULT,
                                 description="Required ID from /etc/os-release.")
    supported_codename: str = Field(default=SUPPORTED_CODENAME_DEFAULT,
                                    description="Required Ubuntu codename.")
    locale: str = Field(default=LOCALE_DEFAULT, description="UTF-8 locale to generate and activate.")

    ros_apt_source_repo: str = Field(default=ROS_APT_SOURCE_REPO_DEFAULT,
                                     description="GitHub repository publishing the ros2-apt-source package.")
    github_api_url: str = Field(default=GITHUB_API_URL_DEFAULT, description="Base URL of the GitHub REST API.")
    github_download_url: str = Field(default=GITHUB_DOWNLOAD_URL_DEFAULT,
                                     description="Base URL for GitHub release downloads.")
    request_timeout: int = Field(default=REQUEST_TIMEOUT_DEFAULT, gt=0,
                                 description="Timeout in seconds for HTTP requests.")

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages from the installer.")

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("ros_variant", mode="before")
    @classmethod
    def _normalise_variant(cls, value):
        variant = str(value).strip().lower()
        if variant not in VARIANT_METAPACKAGE_SUFFIXES:
            raise ValueError(
                f"Unknown ROS_VARIANT='{value}'. Use 'desktop' or 'ros-base'."
            )
        if variant == "base":
            return "ros-base"
        return variant

    @property
    def setup_script(self) -> str:
        return f"/opt/ros/{self.ros_distro}/setup.bash"

    @property
    def setup_line(self) -> str:
        """Line appended to the user's shell startup file."""
        return f"source {self.setup_script}"
