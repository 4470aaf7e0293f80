# tests/conftest.py
import logging
import os
from typing import List, Tuple, Union

import pytest

from common.package_manager import PackageManager, RepositoryRegistrar
from ros2_installer.config_models import AppSettings

INSTALLER_ENV_VARS = ("ROS_VARIANT", "INSTALL_DEV_TOOLS", "SKIP_UPGRADE")


class FakePackageManager(PackageManager):
    """Records every call instead of touching apt."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def update(self) -> None:
        self.calls.append(("update",))

    def install(self, packages: Union[List[str], str]) -> None:
        if not isinstance(packages, list):
            packages = [packages]
        self.calls.append(("install", tuple(packages)))

    def upgrade(self) -> None:
        self.calls.append(("upgrade",))

    def add_component(self, component: str) -> None:
        self.calls.append(("add_component", component))


class FakeRegistrar(RepositoryRegistrar):
    def __init__(self):
        self.urls: List[str] = []

    def install_source_package(self, url: str) -> None:
        self.urls.append(url)


@pytest.fixture(autouse=True)
def clean_installer_env(monkeypatch):
    """Keep the developer's environment out of AppSettings."""
    for name in INSTALLER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("ROS2_INSTALLER_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


@pytest.fixture
def app_settings():
    return AppSettings()


@pytest.fixture
def fake_package_manager():
    return FakePackageManager()


@pytest.fixture
def fake_registrar():
    return FakeRegistrar()


@pytest.fixture
def noble_os_release(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(
        'PRETTY_NAME="Ubuntu 24.04.1 LTS"\n'
        'NAME="Ubuntu"\n'
        'VERSION_ID="24.04"\n'
        'VERSION="24.04.1 LTS (Noble Numbat)"\n'
        "VERSION_CODENAME=noble\n"
        "ID=ubuntu\n"
        "ID_LIKE=debian\n"
        "UBUNTU_CODENAME=noble\n"
    )
    return path
