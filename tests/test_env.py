import os
import platform
from pathlib import Path
from unittest.mock import patch

import pytest

from pulith.env import (
    OS,
    Arch,
    Linux,
    OSKind,
    local_shell,
    path_entries,
    system_arch,
    which_shell,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Ubuntu", Linux.UBUNTU),
        ("Debian GNU/Linux", Linux.DEBIAN),
        ("openSUSE Leap", Linux.OPENSUSE),
        ("openSUSE Tumbleweed", Linux.OPENSUSE),
        ("Alpine Linux", Linux.ALPINE_LINUX),
        ("Plan 9", Linux.UNKNOWN),
    ],
)
def test_linux_from_name(name, expected):
    assert Linux.from_name(name) is expected


def test_os_from_name():
    assert OS.from_name("Windows") == OS(OSKind.WINDOWS)
    assert OS.from_name("macOS") == OS(OSKind.MACOS)
    assert OS.from_name("Arch Linux") == OS(OSKind.LINUX, Linux.ARCH_LINUX)
    assert OS.from_name("Something") == OS(OSKind.LINUX, Linux.UNKNOWN)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("i386", Arch.X86),
        ("i686", Arch.X86),
        ("x86_64", Arch.X86_64),
        ("armv7l", Arch.ARM),
        ("aarch64", Arch.ARM64),
        ("sparc", Arch.UNKNOWN),
    ],
)
def test_arch_from_name(name, expected):
    assert Arch.from_name(name) is expected


def test_system_arch_matches_machine():
    assert system_arch() is Arch.from_name(platform.machine())


def test_path_entries(monkeypatch):
    monkeypatch.setenv("PATH", os.pathsep.join(["/a", "/b"]))
    assert path_entries() == [Path("/a"), Path("/b")]


def test_path_entries_unset(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    monkeypatch.delenv("Path", raising=False)
    assert path_entries() is None


def test_which_shell_from_env(monkeypatch):
    monkeypatch.setattr(os, "getppid", lambda: -1)
    monkeypatch.setenv("SHELL", "/bin/zsh")
    assert which_shell() == "zsh"


def test_which_shell_unknown(monkeypatch):
    monkeypatch.setattr(os, "getppid", lambda: -1)
    monkeypatch.setenv("SHELL", "/bin/tcsh")
    assert which_shell() is None


def test_local_shell_passes_exports(monkeypatch):
    monkeypatch.setattr(os, "getppid", lambda: -1)
    monkeypatch.setenv("SHELL", "/usr/bin/fish")
    assert which_shell() == "fish"
    with patch("pulith.env.subprocess.run") as run:
        local_shell([("PULITH_TEST", "1")])
    assert run.call_count == 1
    (cmd,), kwargs = run.call_args
    assert cmd == ["fish"]
    assert kwargs["env"]["PULITH_TEST"] == "1"


def test_local_shell_without_shell(monkeypatch):
    monkeypatch.setattr(os, "getppid", lambda: -1)
    monkeypatch.delenv("SHELL", raising=False)
    with pytest.raises(RuntimeError):
        local_shell({})