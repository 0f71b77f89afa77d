"""Persistent registries: hash-checked files and a key-value cache."""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
import sqlite3
from collections.abc import Callable
from os import PathLike
from pathlib import Path
from typing import Any, Generic, TypeVar

T = TypeVar("T")

StrPath = str | PathLike


class RegError(Exception):
    """Raised when a registry cannot be read or written."""


class NotFoundError(RegError):
    def __init__(self, root: Path, entry_id: Path) -> None:
        super().__init__(f"File {root}/{entry_id} not found")
        self.root = root
        self.entry_id = entry_id


class HashMismatchError(RegError):
    def __init__(self) -> None:
        super().__init__("Last Hash mismatch current hash, Cache changed externally")


def locate(root: StrPath, entry_id: StrPath) -> Path | None:
    """The registry file's path if it exists."""
    path = Path(root) / entry_id
    return path if path.exists() else None


def _canonical(storage: Any) -> bytes:
    try:
        return json.dumps(storage, sort_keys=True, separators=(",", ":")).encode()
    except (TypeError, ValueError) as exc:
        raise RegError(f"cannot serialize registry: {exc}") from exc


def _digest(storage: Any) -> str:
    return hashlib.sha256(_canonical(storage)).hexdigest()


class RegLoader(Generic[T]):
    """A registry file whose contents are checked against their recorded hash.

    Changes to ``storage`` are written by ``save`` once ``mark_dirty`` has been
    called; used as a context manager it saves on exit.
    """

    def __init__(
        self, root: StrPath, entry_id: StrPath, storage: T, last_hash: str | None = None
    ) -> None:
        self.root = Path(root)
        self.entry_id = Path(entry_id)
        self.storage = storage
        self.last_hash = last_hash
        self.dirty = False

    @classmethod
    def load(
        cls, root: StrPath, entry_id: StrPath, factory: Callable[[], T] = dict
    ) -> RegLoader[T]:
        """Read the registry, or start from ``factory()`` when the file is absent."""
        path = locate(root, entry_id)
        if path is None:
            return cls(root, entry_id, factory())
        try:
            document = json.loads(path.read_bytes())
        except OSError as exc:
            raise RegError(f"cannot read {path}: {exc}") from exc
        except ValueError as exc:
            raise RegError(f"invalid registry {path}: {exc}") from exc
        if not isinstance(document, dict) or "storage" not in document:
            raise RegError(f"invalid registry {path}: missing storage")
        storage = document["storage"]
        last_hash = document.get("hash")
        if last_hash is not None and last_hash != _digest(storage):
            raise HashMismatchError()
        return cls(root, entry_id, storage, last_hash)

    def mark_dirty(self) -> None:
        self.dirty = True

    def save(self) -> None:
        """Write the registry atomically if it has changed."""
        if not self.dirty:
            return
        if not self.root.is_dir():
            raise NotFoundError(self.root, self.entry_id)
        path = self.root / self.entry_id
        digest = _digest(self.storage)
        data = json.dumps({"hash": digest, "storage": self.storage}, sort_keys=True).encode()
        tmp_path = path.with_suffix(".tmp")
        try:
            with open(tmp_path, "wb") as file:
                file.write(data)
                file.flush()
                os.fsync(file.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise RegError(f"cannot write {path}: {exc}") from exc
        self.last_hash = digest
        self.dirty = False

    def __enter__(self) -> RegLoader[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with contextlib.suppress(RegError):
            self.save()


class KeyValueCache(Generic[T]):
    """A persistent string-keyed store of JSON-serializable values."""

    def __init__(self, path: StrPath) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(path)
            with self._conn:
                self._conn.execute(
                    "CREATE TABLE IF NOT EXISTS kv (key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                )
        except (OSError, sqlite3.Error) as exc:
            raise RegError(f"Database Error {exc}") from exc

    def _read(self, key: bytes) -> T | None:
        row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as exc:
            raise RegError(f"Serialization Error {exc}") from exc

    def upsert(self, key: str, update: Callable[[T | None], T]) -> None:
        """Replace the value at ``key`` with ``update(old)``, old being None if absent."""
        encoded = key.encode()
        try:
            with self._conn:
                new = update(self._read(encoded))
                try:
                    value = json.dumps(new).encode()
                except (TypeError, ValueError) as exc:
                    raise RegError(f"Serialization Error {exc}") from exc
                self._conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (encoded, value)
                )
        except sqlite3.Error as exc:
            raise RegError(f"Database Error {exc}") from exc

    def get(self, key: str) -> T | None:
        try:
            return self._read(key.encode())
        except sqlite3.Error as exc:
            raise RegError(f"Database Error {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> KeyValueCache[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()