# tests/ros2_installer/test_preflight.py
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from common.exceptions import PreconditionError
from common.system_utils import OSIdentity, TargetUser
from ros2_installer.main_installer import build_orchestrator
from ros2_installer.preflight import (
    ensure_not_root,
    verify_os_step,
    verify_os_support,
)


def test_ensure_not_root_rejects_root():
    with pytest.raises(PreconditionError, match="Do not run this script with sudo"):
        ensure_not_root(euid=0)


def test_ensure_not_root_accepts_normal_user():
    ensure_not_root(euid=1000)


def test_verify_os_support_accepts_noble(app_settings):
    verify_os_support(OSIdentity("ubuntu", "noble"), app_settings)


@pytest.mark.parametrize(
    "identity, message",
    [
        (OSIdentity("ubuntu", "jammy"), "codename 'jammy'"),
        (OSIdentity("debian", "bookworm"), "Detected ID='debian'"),
        (OSIdentity("", ""), "Detected ID='unknown'"),
    ],
)
def test_verify_os_support_rejects_other_systems(app_settings, identity, message):
    with pytest.raises(PreconditionError, match=message):
        verify_os_support(identity, app_settings)


def test_verify_os_step_stores_identity(app_settings, noble_os_release):
    context = {}

    identity = verify_os_step(context, app_settings, noble_os_release, MagicMock())

    assert identity == OSIdentity("ubuntu", "noble")
    assert context["os_identity"] == identity


def test_verify_os_step_missing_os_release(app_settings, tmp_path):
    with pytest.raises(PreconditionError, match="not found or unreadable"):
        verify_os_step({}, app_settings, tmp_path / "missing")


@pytest.mark.parametrize(
    "os_release",
    ["ID=ubuntu\nUBUNTU_CODENAME=jammy\n", "ID=fedora\nVERSION_CODENAME=\n"],
)
def test_unsupported_os_stops_before_any_package_operation(
    app_settings, fake_package_manager, fake_registrar, tmp_path, os_release
):
    os_release_path = tmp_path / "os-release"
    os_release_path.write_text(os_release)
    rosdep = MagicMock()

    orchestrator = build_orchestrator(
        app_settings,
        fake_package_manager,
        fake_registrar,
        rosdep,
        TargetUser("alice", tmp_path),
        MagicMock(),
        os_release_path=os_release_path,
    )

    with pytest.raises(PreconditionError):
        orchestrator.run()

    assert fake_package_manager.calls == []
    assert fake_registrar.urls == []
    rosdep.init.assert_not_called()
    assert not (tmp_path / ".bashrc").exists()


def test_ensure_not_root_checks_effective_uid(mocker):
    mocker.patch("common.system_utils.os.geteuid", return_value=0)

    with pytest.raises(PreconditionError):
        ensure_not_root()


def test_verify_os_step_undecodable_os_release(app_settings, tmp_path):
    path = tmp_path / "os-release"
    path.write_bytes(b"ID=\xffubuntu\n")

    with pytest.raises(PreconditionError, match="not found or unreadable"):
        verify_os_step({}, app_settings, path)
