"""Package manager backends."""

from __future__ import annotations

import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from pulith.env import OS, Linux, OSKind, system_os
from pulith.ver import VersionKind

if TYPE_CHECKING:
    from pulith.package import Package


class BackendError(Exception):
    """Raised when a backend cannot be resolved or used."""


class BackendType(Enum):
    UNKNOWN = ""
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    APK = "apk"
    BREW = "brew"
    WINGET = "winget"
    SCOOP = "scoop"
    CHOCO = "choco"

    @classmethod
    def parse(cls, text: str) -> BackendType:
        try:
            return cls(text)
        except ValueError:
            raise BackendError(f"unknown backend: {text!r}") from None

    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


_DISTRO_PM = {
    Linux.DEBIAN: BackendType.APT,
    Linux.UBUNTU: BackendType.APT,
    Linux.LINUX_MINT: BackendType.APT,
    Linux.KALI_LINUX: BackendType.APT,
    Linux.FEDORA: BackendType.DNF,
    Linux.RED_HAT_ENTERPRISE_LINUX: BackendType.DNF,
    Linux.ARCH_LINUX: BackendType.PACMAN,
    Linux.MANJARO: BackendType.PACMAN,
    Linux.OPENSUSE: BackendType.ZYPPER,
    Linux.ALPINE_LINUX: BackendType.APK,
}


def which_pm(os_info: OS | None = None) -> BackendType | None:
    """The native package manager for an operating system (the host by default)."""
    info = os_info if os_info is not None else system_os()
    match info.kind:
        case OSKind.MACOS:
            return BackendType.BREW
        case OSKind.WINDOWS:
            return BackendType.WINGET
        case OSKind.LINUX:
            return _DISTRO_PM.get(info.distro)
        case _:
            return None


@dataclass(frozen=True)
class Metadata:
    id: str
    homepage: str
    description: str
    notes: str | None = None

    def with_notes(self, notes: str) -> Metadata:
        return replace(self, notes=notes)


@dataclass
class Snap:
    """State of an installed tool captured for later restoration."""

    install_path: Path
    version: VersionKind
    before: datetime
    env_var: dict[str, list[str]] = field(default_factory=dict)


class Backend(ABC):
    """A package manager that tools can be installed through."""

    @abstractmethod
    def metadata(self) -> Metadata: ...

    def snap(self) -> Snap | None:
        return None


@dataclass(frozen=True)
class Winget(Backend):
    """The Windows native package manager."""

    path: Path

    @classmethod
    def locate(cls) -> Winget:
        found = shutil.which("winget")
        if found is None:
            raise BackendError("winget executable not found")
        return cls(Path(found))

    def metadata(self) -> Metadata:
        return Metadata("winget", "microsoft/winget-cli", "Windows Native Package Manager")

    def add_command(self, package: Package) -> list[str]:
        cmd = [str(self.path), "add", package.name]
        if package.ver is not None:
            cmd += ["-v", str(package.ver)]
        return cmd

    def add(self, package: Package) -> subprocess.CompletedProcess:
        return subprocess.run(self.add_command(package), capture_output=True, check=False)