# tests/common/test_system_utils.py
import pwd
from pathlib import Path

import pytest

from common.exceptions import PreconditionError
from common.system_utils import (
    OSIdentity,
    TargetUser,
    determine_log_path,
    is_running_as_root,
    parse_os_release,
    read_os_release,
    resolve_target_user,
)


def test_parse_os_release_handles_quotes_and_comments():
    content = (
        "# comment\n"
        "\n"
        'NAME="Ubuntu"\n'
        "ID=ubuntu\n"
        "VERSION='24.04 LTS (Noble Numbat)'\n"
        "garbage line\n"
    )

    values = parse_os_release(content)

    assert values == {
        "NAME": "Ubuntu",
        "ID": "ubuntu",
        "VERSION": "24.04 LTS (Noble Numbat)",
    }


def test_read_os_release_prefers_ubuntu_codename(noble_os_release):
    assert read_os_release(noble_os_release) == OSIdentity("ubuntu", "noble")


def test_read_os_release_falls_back_to_version_codename(tmp_path):
    path = tmp_path / "os-release"
    path.write_text("ID=debian\nVERSION_CODENAME=bookworm\n")

    assert read_os_release(path) == OSIdentity("debian", "bookworm")


def test_read_os_release_missing_file(tmp_path):
    with pytest.raises(PreconditionError):
        read_os_release(tmp_path / "missing")


def test_resolve_target_user_prefers_sudo_user(mocker):
    mocker.patch(
        "common.system_utils.pwd.getpwnam",
        return_value=mocker.MagicMock(pw_dir="/home/alice"),
    )

    user = resolve_target_user({"SUDO_USER": "alice", "USER": "root"})

    assert user == TargetUser("alice", Path("/home/alice"))


def test_resolve_target_user_unknown_name_falls_back(mocker):
    mocker.patch("common.system_utils.pwd.getpwnam", side_effect=KeyError("nobody"))
    mocker.patch("common.system_utils.os.path.expanduser", return_value="~ghost")
    mocker.patch("common.system_utils.Path.home", return_value=Path("/home/me"))

    user = resolve_target_user({"USER": "ghost"})

    assert user == TargetUser("ghost", Path("/home/me"))


def test_resolve_target_user_uses_process_owner(mocker):
    mocker.patch("common.system_utils.getpass.getuser", return_value="bob")
    mocker.patch(
        "common.system_utils.pwd.getpwnam",
        return_value=mocker.MagicMock(spec=pwd.struct_passwd, pw_dir="/home/bob"),
    )

    assert resolve_target_user({}).name == "bob"


def test_determine_log_path_prefers_desktop(tmp_path):
    (tmp_path / "Desktop").mkdir()
    user = TargetUser("alice", tmp_path)

    assert determine_log_path(user, "kilted") == tmp_path / "Desktop" / "ros2_kilted_install.log"


def test_determine_log_path_without_desktop(tmp_path):
    user = TargetUser("alice", tmp_path)

    assert determine_log_path(user, "kilted") == tmp_path / "ros2_kilted_install.log"


def test_read_os_release_invalid_utf8(tmp_path):
    path = tmp_path / "os-release"
    path.write_bytes(b"ID=ubuntu\nNAME=\xff\xfe\n")

    with pytest.raises(PreconditionError):
        read_os_release(path)


def test_is_running_as_root(mocker):
    mock_geteuid = mocker.patch("common.system_utils.os.geteuid", return_value=0)
    assert is_running_as_root() is True

    mock_geteuid.return_value = 1000
    assert is_running_as_root() is False
