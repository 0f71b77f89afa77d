from pathlib import Path
from unittest.mock import patch

import pytest

from pulith.backend import (
    Backend,
    BackendError,
    BackendType,
    Metadata,
    Winget,
    which_pm,
)
from pulith.env import OS, OSKind
from pulith.package import Package
from pulith.ver import SemVer


@pytest.mark.parametrize("bt", list(BackendType))
def test_parse_label_round_trip(bt):
    assert BackendType.parse(bt.label()) is bt
    assert str(bt) == bt.label()


def test_parse_known_names():
    assert BackendType.parse("apt") is BackendType.APT
    assert BackendType.parse("choco") is BackendType.CHOCO
    assert BackendType.parse("") is BackendType.UNKNOWN


def test_parse_unknown_raises():
    with pytest.raises(BackendError):
        BackendType.parse("nix")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Ubuntu", BackendType.APT),
        ("Kali Linux", BackendType.APT),
        ("Fedora", BackendType.DNF),
        ("Manjaro Linux", BackendType.PACMAN),
        ("openSUSE Leap", BackendType.ZYPPER),
        ("Alpine Linux", BackendType.APK),
        ("macOS", BackendType.BREW),
        ("Windows", BackendType.WINGET),
        ("Gentoo", None),
    ],
)
def test_which_pm(name, expected):
    assert which_pm(OS.from_name(name)) is expected


def test_which_pm_unknown_os():
    assert which_pm(OS(OSKind.UNKNOWN)) is None


def test_metadata_with_notes():
    base = Metadata("x", "home", "desc")
    noted = base.with_notes("careful")
    assert noted.notes == "careful"
    assert (noted.id, noted.homepage, noted.description) == ("x", "home", "desc")
    assert base.notes is None


def test_backend_defaults():
    backend = Winget(Path("winget"))
    assert backend.snap() is None
    assert backend.metadata().description == "Windows Native Package Manager"


def test_backend_is_abstract():
    with pytest.raises(TypeError):
        Backend()


def test_winget_metadata():
    assert Winget(Path("winget")).metadata().id == "winget"


def test_winget_add_command_without_version():
    wg = Winget(Path("winget"))
    assert wg.add_command(Package(args=("git",))) == ["winget", "add", "git"]


def test_winget_add_command_with_version():
    wg = Winget(Path("winget"))
    pkg = Package(args=("git", "extra"), ver=SemVer.parse("1.2.3"))
    assert wg.add_command(pkg) == ["winget", "add", "git", "-v", "1.2.3"]


def test_winget_add_runs_command():
    wg = Winget(Path("winget"))
    pkg = Package(args=("git",))
    with patch("pulith.backend.subprocess.run") as run:
        result = wg.add(pkg)
    assert result is run.return_value
    assert run.call_args.args[0] == ["winget", "add", "git"]


def test_winget_locate_missing():
    with patch("pulith.backend.shutil.which", return_value=None):
        with pytest.raises(BackendError):
            Winget.locate()


def test_winget_locate_found():
    with patch("pulith.backend.shutil.which", return_value="/opt/bin/winget"):
        assert Winget.locate().path == Path("/opt/bin/winget")