"""Locations used by pulith: home, working directory and the store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Store:
    """The pulith store directory and its subdirectories."""

    root: Path
    bin: Path
    cache: Path
    temp: Path

    @classmethod
    def from_root(cls, root: str | os.PathLike) -> Store:
        base = Path(root)
        return cls(root=base, bin=base / "bin", cache=base / "cache", temp=base / "temp")


@dataclass(frozen=True)
class PulithEnv:
    home: Path
    pwd: Path
    store: Store

    @classmethod
    def from_environment(cls) -> PulithEnv:
        """Read locations from the process; ``PULITH_ROOT`` overrides ``~/.pulith``."""
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as exc:
            raise RuntimeError("Failed to get home directory") from exc
        try:
            pwd = Path.cwd()
        except OSError as exc:
            raise RuntimeError("Failed to get current directory") from exc
        override = os.environ.get("PULITH_ROOT")
        root = Path(override) if override is not None else home / ".pulith"
        return cls(home=home, pwd=pwd, store=Store.from_root(root))