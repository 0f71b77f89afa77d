"""Inventory of backend snapshots and installed tools."""

from __future__ import annotations

import dataclasses
import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Any

from pulith.backend import BackendType, Snap
from pulith.ver import CalVer, Partial, SemVer, VersionKind


class InventoryError(Exception):
    """Raised when the inventory cannot be read or written."""


class ScopeKind(Enum):
    GLOBAL = "global"
    LOCAL = "local"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class Scope:
    """Where a tool is active: globally, in listed directories, or hidden."""

    kind: ScopeKind = ScopeKind.GLOBAL
    paths: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", tuple(Path(p) for p in self.paths))


@dataclass(frozen=True)
class ToolStatus:
    install_path: Path
    version: VersionKind
    scope: Scope = field(default_factory=Scope)
    updated_at: int | None = None
    checksum: bytes | None = None


def _hex(text: str) -> str:
    return text.encode().hex()


def bk_snap_key(backend: BackendType) -> bytes:
    return f"bk:snap:{_hex(backend.value)}".encode()


def tool_key_prefix(backend: BackendType | None = None) -> bytes:
    if backend is None:
        return b"bk:tool:"
    return f"bk:tool:{_hex(backend.value)}:".encode()


def tool_key(backend: BackendType, tool: str) -> bytes:
    return f"bk:tool:{_hex(backend.value)}:{_hex(tool)}".encode()


_VERSION_KINDS: dict[str, type] = {"semver": SemVer, "calver": CalVer, "partial": Partial}


def _encode_version(version: VersionKind) -> dict[str, Any]:
    kind = next(name for name, cls in _VERSION_KINDS.items() if type(version) is cls)
    return {"kind": kind, **dataclasses.asdict(version)}


def _decode_version(data: dict[str, Any]) -> VersionKind:
    fields = dict(data)
    return _VERSION_KINDS[fields.pop("kind")](**fields)


def _encode_tool(status: ToolStatus) -> dict[str, Any]:
    return {
        "install_path": str(status.install_path),
        "version": _encode_version(status.version),
        "scope": {"kind": status.scope.kind.value, "paths": [str(p) for p in status.scope.paths]},
        "updated_at": status.updated_at,
        "checksum": status.checksum.hex() if status.checksum is not None else None,
    }


def _decode_tool(data: dict[str, Any]) -> ToolStatus:
    checksum = data.get("checksum")
    return ToolStatus(
        install_path=Path(data["install_path"]),
        version=_decode_version(data["version"]),
        scope=Scope(ScopeKind(data["scope"]["kind"]), tuple(data["scope"]["paths"])),
        updated_at=data.get("updated_at"),
        checksum=bytes.fromhex(checksum) if checksum is not None else None,
    )


def _encode_snap(snap: Snap) -> dict[str, Any]:
    return {
        "install_path": str(snap.install_path),
        "env_var": {k: list(v) for k, v in snap.env_var.items()},
        "version": _encode_version(snap.version),
        "before": snap.before.isoformat(),
    }


def _decode_snap(data: dict[str, Any]) -> Snap:
    return Snap(
        install_path=Path(data["install_path"]),
        version=_decode_version(data["version"]),
        before=datetime.fromisoformat(data["before"]),
        env_var={k: list(v) for k, v in data["env_var"].items()},
    )


def _decode(raw: bytes, decoder):
    try:
        return decoder(json.loads(raw))
    except (ValueError, KeyError, TypeError, StopIteration) as exc:
        raise InventoryError(f"Serialization Error {exc}") from exc


class Inventory:
    """A key-ordered store of backend snapshots and tool states."""

    def __init__(self, path: str | PathLike) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(path)
            with self._conn:
                self._conn.execute(
                    "CREATE TABLE IF NOT EXISTS kv (key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                )
        except (OSError, sqlite3.Error) as exc:
            raise InventoryError(f"Database Error {exc}") from exc

    def _get(self, key: bytes) -> bytes | None:
        try:
            row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise InventoryError(f"Database Error {exc}") from exc
        return row[0] if row is not None else None

    def _put(self, key: bytes, value: dict[str, Any]) -> None:
        try:
            data = json.dumps(value).encode()
        except (TypeError, ValueError) as exc:
            raise InventoryError(f"Serialization Error {exc}") from exc
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, data)
                )
        except sqlite3.Error as exc:
            raise InventoryError(f"Database Error {exc}") from exc

    def get_snap(self, backend: BackendType) -> Snap | None:
        raw = self._get(bk_snap_key(backend))
        return _decode(raw, _decode_snap) if raw is not None else None

    def upsert_snap(self, backend: BackendType, snap: Snap) -> None:
        self._put(bk_snap_key(backend), _encode_snap(snap))

    def get_tool(self, backend: BackendType, tool: str) -> ToolStatus | None:
        raw = self._get(tool_key(backend, tool))
        return _decode(raw, _decode_tool) if raw is not None else None

    def upsert_tool(self, backend: BackendType, tool: str, status: ToolStatus) -> None:
        self._put(tool_key(backend, tool), _encode_tool(status))

    def get_tools(self, backend: BackendType | None = None) -> list[ToolStatus]:
        """All tools of one backend, or of every backend, in key order."""
        prefix = tool_key_prefix(backend)
        try:
            rows = self._conn.execute(
                "SELECT key, value FROM kv WHERE key >= ? ORDER BY key", (prefix,)
            )
            tools = []
            for key, value in rows:
                if not bytes(key).startswith(prefix):
                    break
                tools.append(_decode(value, _decode_tool))
        except sqlite3.Error as exc:
            raise InventoryError(f"Database Error {exc}") from exc
        return tools

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> Inventory:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()