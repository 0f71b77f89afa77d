"""Host system detection and shell execution helpers."""

from __future__ import annotations

import functools
import os
import platform
import subprocess
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path


class Linux(Enum):
    DEBIAN = auto()
    UBUNTU = auto()
    LINUX_MINT = auto()
    FEDORA = auto()
    RED_HAT_ENTERPRISE_LINUX = auto()
    CENTOS = auto()
    ARCH_LINUX = auto()
    MANJARO = auto()
    OPENSUSE = auto()
    GENTOO = auto()
    ALPINE_LINUX = auto()
    KALI_LINUX = auto()
    UNKNOWN = auto()

    @classmethod
    def from_name(cls, name: str) -> Linux:
        """Map a distribution's reported name to a known distribution."""
        return _LINUX_NAMES.get(name, cls.UNKNOWN)


_LINUX_NAMES = {
    "Debian GNU/Linux": Linux.DEBIAN,
    "Ubuntu": Linux.UBUNTU,
    "Linux Mint": Linux.LINUX_MINT,
    "Fedora": Linux.FEDORA,
    "Red Hat Enterprise Linux": Linux.RED_HAT_ENTERPRISE_LINUX,
    "CentOS Linux": Linux.CENTOS,
    "Arch Linux": Linux.ARCH_LINUX,
    "Manjaro Linux": Linux.MANJARO,
    "openSUSE Leap": Linux.OPENSUSE,
    "openSUSE Tumbleweed": Linux.OPENSUSE,
    "Gentoo": Linux.GENTOO,
    "Alpine Linux": Linux.ALPINE_LINUX,
    "Kali Linux": Linux.KALI_LINUX,
}


class OSKind(Enum):
    WINDOWS = auto()
    MACOS = auto()
    LINUX = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class OS:
    """An operating system; Linux systems carry their distribution."""

    kind: OSKind
    distro: Linux | None = None

    @classmethod
    def from_name(cls, name: str) -> OS:
        if name == "Windows":
            return cls(OSKind.WINDOWS)
        if name == "macOS":
            return cls(OSKind.MACOS)
        return cls(OSKind.LINUX, Linux.from_name(name))


class Arch(Enum):
    X86 = auto()
    X86_64 = auto()
    ARM = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    @classmethod
    def from_name(cls, name: str) -> Arch:
        return _ARCH_NAMES.get(name, cls.UNKNOWN)


_ARCH_NAMES = {
    "i386": Arch.X86,
    "i686": Arch.X86,
    "x86_64": Arch.X86_64,
    "arm": Arch.ARM,
    "armv7l": Arch.ARM,
    "aarch64": Arch.ARM64,
}


def _system_name() -> str | None:
    system = platform.system()
    if system == "Windows":
        return "Windows"
    if system == "Darwin":
        return "macOS"
    if system == "Linux":
        try:
            return platform.freedesktop_os_release().get("NAME")
        except OSError:
            return None
    return system or None


@functools.cache
def system_os() -> OS:
    """The operating system of this host, detected once."""
    name = _system_name()
    if name is None:
        return OS(OSKind.UNKNOWN)
    return OS.from_name(name)


@functools.cache
def system_arch() -> Arch:
    """The CPU architecture of this host, detected once."""
    return Arch.from_name(platform.machine())


_SHELLS = {
    "bash": "bash",
    "elvish": "elvish",
    "fish": "fish",
    "ion": "ion",
    "nu": "nu",
    "nushell": "nu",
    "pwsh": "pwsh",
    "powershell": "pwsh",
    "xonsh": "xonsh",
    "zsh": "zsh",
}


def _parent_process_name() -> str | None:
    try:
        return Path(f"/proc/{os.getppid()}/comm").read_text().strip()
    except OSError:
        return None


def which_shell() -> str | None:
    """Command name of the user's shell, or None if it is not a known shell."""
    for candidate in (_parent_process_name(), os.environ.get("SHELL")):
        if not candidate:
            continue
        name = Path(candidate).name.lower().removesuffix(".exe")
        if name in _SHELLS:
            return _SHELLS[name]
    return None


def path_entries() -> list[Path] | None:
    """Directories listed in the search path variable, or None if it is unset."""
    var = "Path" if sys.platform == "win32" else "PATH"
    value = os.environ.get(var)
    if value is None:
        return None
    return [Path(entry) for entry in value.split(os.pathsep)]


def local_shell(exports: Mapping[str, str] | Iterable[tuple[str, str]]) -> None:
    """Start the user's shell with extra environment variables and wait for it to exit."""
    shell = which_shell()
    if shell is None:
        raise RuntimeError("could not detect the current shell")
    env = {**os.environ, **dict(exports)}
    subprocess.run([shell], env=env, check=False)