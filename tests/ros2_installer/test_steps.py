# tests/ros2_installer/test_steps.py
from unittest.mock import MagicMock

import pytest

from common.exceptions import ConfigurationError, ReleaseMetadataError
from common.system_utils import OSIdentity, TargetUser
from ros2_installer.shell_integration import ShellRcAction
from ros2_installer.steps import (
    configure_locale,
    configure_shell,
    enable_universe_repository,
    install_ros_apt_source,
    install_ros_packages,
    log_completion,
    select_metapackage,
    update_and_upgrade,
)

TOOLING = (
    "python3-rosdep",
    "python3-colcon-common-extensions",
    "python3-argcomplete",
    "python3-vcstool",
    "build-essential",
)


@pytest.mark.parametrize(
    "variant, expected",
    [
        ("desktop", "ros-kilted-desktop"),
        ("ros-base", "ros-kilted-ros-base"),
        ("base", "ros-kilted-ros-base"),
    ],
)
def test_select_metapackage(variant, expected):
    assert select_metapackage("kilted", variant) == expected


def test_select_metapackage_unknown_variant():
    with pytest.raises(ConfigurationError):
        select_metapackage("kilted", "full")


def test_configure_locale(mocker, app_settings, fake_package_manager):
    mock_elevated = mocker.patch("ros2_installer.steps.run_elevated_command")
    environ = {}

    configure_locale(fake_package_manager, {}, app_settings, MagicMock(), environ)

    assert fake_package_manager.calls == [("update",), ("install", ("locales",))]
    commands = [c.args[0] for c in mock_elevated.call_args_list]
    assert commands == [
        ["locale-gen", "en_US", "en_US.UTF-8"],
        ["update-locale", "LC_ALL=en_US.UTF-8", "LANG=en_US.UTF-8"],
    ]
    assert environ["LANG"] == "en_US.UTF-8"


def test_enable_universe_repository(app_settings, fake_package_manager):
    enable_universe_repository(fake_package_manager, {}, app_settings)

    assert fake_package_manager.calls == [
        ("install", ("software-properties-common",)),
        ("add_component", "universe"),
        ("update",),
    ]


def test_install_ros_apt_source_uses_detected_codename(app_settings, fake_registrar):
    fetch_tag = MagicMock(return_value="1.1.0")
    context = {"os_identity": OSIdentity("ubuntu", "noble")}
    logger = MagicMock()

    tag = install_ros_apt_source(
        fake_registrar, context, app_settings, logger, fetch_tag=fetch_tag
    )

    assert tag == "1.1.0"
    assert context["ros_apt_source_version"] == "1.1.0"
    fetch_tag.assert_called_once_with(
        "ros-infrastructure/ros-apt-source",
        api_url="https://api.github.com",
        timeout=60,
        current_logger=logger,
    )
    assert fake_registrar.urls == [
        "https://github.com/ros-infrastructure/ros-apt-source/releases/download/"
        "1.1.0/ros2-apt-source_1.1.0.noble_all.deb"
    ]


def test_install_ros_apt_source_metadata_error_installs_nothing(app_settings, fake_registrar):
    fetch_tag = MagicMock(side_effect=ReleaseMetadataError("no tag_name"))

    with pytest.raises(ReleaseMetadataError):
        install_ros_apt_source(fake_registrar, {}, app_settings, fetch_tag=fetch_tag)

    assert fake_registrar.urls == []


def test_install_ros_apt_source_default_fetcher(mocker, app_settings, fake_registrar):
    mock_fetch = mocker.patch(
        "ros2_installer.steps.fetch_latest_release_tag", return_value="2.0.0"
    )

    assert install_ros_apt_source(fake_registrar, {}, app_settings) == "2.0.0"
    mock_fetch.assert_called_once()
    assert fake_registrar.urls[0].endswith("ros2-apt-source_2.0.0.noble_all.deb")


def test_update_and_upgrade(app_settings, fake_package_manager):
    assert update_and_upgrade(fake_package_manager, {}, app_settings) is True
    assert fake_package_manager.calls == [("update",), ("upgrade",)]


def test_skip_upgrade_never_upgrades(app_settings, fake_package_manager):
    settings = app_settings.model_copy(update={"skip_upgrade": True})
    logger = MagicMock()

    assert update_and_upgrade(fake_package_manager, {}, settings, logger) is False
    assert fake_package_manager.calls == [("update",)]
    logger.info.assert_called_once_with(
        "SKIP_UPGRADE set; skipping 'apt-get upgrade'.", exc_info=False
    )


def test_install_ros_packages_desktop_with_dev_tools(app_settings, fake_package_manager):
    metapackage = install_ros_packages(fake_package_manager, {}, app_settings)

    assert metapackage == "ros-kilted-desktop"
    assert fake_package_manager.calls == [
        ("install", ("ros-kilted-desktop",)),
        ("install", TOOLING),
        ("install", ("ros-dev-tools",)),
    ]


def test_install_ros_packages_base_without_dev_tools(app_settings, fake_package_manager):
    settings = app_settings.model_copy(
        update={"ros_variant": "ros-base", "install_dev_tools": False}
    )

    install_ros_packages(fake_package_manager, {}, settings)

    assert fake_package_manager.calls == [
        ("install", ("ros-kilted-ros-base",)),
        ("install", TOOLING),
    ]


def test_install_ros_packages_invalid_variant_installs_nothing(
    app_settings, fake_package_manager
):
    settings = app_settings.model_copy(update={"ros_variant": "everything"})

    with pytest.raises(ConfigurationError):
        install_ros_packages(fake_package_manager, {}, settings)

    assert fake_package_manager.calls == []


def test_configure_shell_targets_bashrc(app_settings, tmp_path):
    action = configure_shell(TargetUser("alice", tmp_path), {}, app_settings)

    assert action is ShellRcAction.CREATED
    assert (tmp_path / ".bashrc").read_text() == "source /opt/ros/kilted/setup.bash\n"


def test_log_completion_mentions_setup_and_demo(app_settings):
    logger = MagicMock()

    log_completion(app_settings, logger)

    messages = [c.args[0] for c in logger.info.call_args_list]
    assert "  source /opt/ros/kilted/setup.bash" in messages
    assert "  ros2 run demo_nodes_cpp talker" in messages
    assert "  ros2 run demo_nodes_py listener" in messages
