"""Package descriptors given on the command line."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pulith.backend import BackendError, BackendType
from pulith.ver import VersionError, VersionKind, parse_version

_USIZE_RE = re.compile(r"\+?[0-9]+")
_USIZE_MAX = 2**64 - 1


class DescriptorError(ValueError):
    """Raised when a descriptor cannot be parsed."""


class InvalidBackendError(DescriptorError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid backend type: {detail}")


class InvalidVersionError(DescriptorError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid version specification: {detail}")


class MissingArgsError(DescriptorError):
    def __init__(self) -> None:
        super().__init__("missing arguments for package descriptor")


@dataclass(frozen=True)
class Package:
    """A package request: an optional backend, arguments and an optional version."""

    args: tuple[str, ...]
    backend: BackendType | None = None
    ver: VersionKind | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def name(self) -> str:
        if not self.args:
            raise ValueError("package has no arguments")
        return self.args[0]

    @property
    def id(self) -> str:
        def sanitize(text: str) -> str:
            return "".join(c for c in text if (c.isascii() and c.isalnum()) or c == "-").lower()

        prefix = sanitize(self.backend.label()) if self.backend is not None else "unknown"
        return f"{prefix}.{sanitize(self.name)}"

    def __str__(self) -> str:
        backend = f"@{self.backend.label()}:" if self.backend is not None else ""
        args = " ".join(self.args).replace(":", "\\:")
        ver = f":{self.ver}" if self.ver is not None else ""
        return f"{backend}{args}{ver}"


Descriptor = BackendType | Package | int


def _parse_backend(text: str) -> BackendType:
    try:
        return BackendType.parse(text)
    except BackendError as exc:
        raise InvalidBackendError(str(exc)) from exc


def parse_descriptor(text: str) -> Descriptor:
    """Parse a list index, ``@backend``, or ``[@backend:]args[:version]``."""
    if _USIZE_RE.fullmatch(text) and int(text) <= _USIZE_MAX:
        return int(text)

    backend: BackendType | None = None
    spec = text
    if text.startswith("@"):
        stripped = text[1:]
        name, sep, rest = stripped.partition(":")
        if not sep:
            return _parse_backend(stripped)
        backend = _parse_backend(name)
        spec = rest

    args_str, sep, ver_str = spec.rpartition(":")
    if not sep:
        args_str, ver_str = spec, None

    args = tuple(args_str.split())
    if not args:
        raise MissingArgsError()

    ver = None
    if ver_str is not None:
        try:
            ver = parse_version(ver_str)
        except VersionError as exc:
            raise InvalidVersionError(str(exc)) from exc

    return Package(args=args, backend=backend, ver=ver)


def format_descriptor(descriptor: Descriptor) -> str:
    """Render a descriptor as text."""
    match descriptor:
        case BackendType():
            return descriptor.label()
        case Package():
            return str(descriptor)
        case int():
            return str(descriptor)
    raise TypeError(f"not a descriptor: {descriptor!r}")