"""Version parsing: semantic, calendar and loosely structured partial versions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_U64_MAX = 2**64 - 1

_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?"
)

_CALVER_RE = re.compile(
    r"(?P<year>[0-9]{1,4})-(?P<month>((0?[1-9]{1})|10|11|12))"
    r"(-(?P<day>(0?[1-9]{1}|[1-3]{1}[0-9]{1})))?"
    r"((_|\.)(?P<micro>[0-9]+))?"
    r"(?P<pre>-[a-zA-Z]{1}[-0-9a-zA-Z.]+)?"
)

_PARTIAL_RE = re.compile(r"([^.]*)(?:\.([^.]*))?(?:\.([^.]*))?(?:[+\./-](.*))?")


class VersionError(ValueError):
    """Raised when a version string cannot be parsed."""


class CalVerError(VersionError):
    """Raised when a string is not a valid calendar version."""

    def __init__(self, text: str) -> None:
        super().__init__(f'Parse Calendar version error: "{text}"')
        self.text = text


class PartialError(VersionError):
    """Raised when a string cannot be split into partial version parts."""

    def __init__(self, msg: str) -> None:
        super().__init__(f"Parse Partial version error: {msg}")
        self.msg = msg


def _is_numeric(ident: str) -> bool:
    return ident.isascii() and ident.isdigit()


def _pre_key(pre: str) -> tuple:
    # A release sorts after any of its pre-releases.
    if not pre:
        return (1, ())
    return (
        0,
        tuple((0, int(i), "") if _is_numeric(i) else (1, 0, i) for i in pre.split(".")),
    )


def _build_key(build: str) -> tuple:
    if not build:
        return (0, ())
    return (
        1,
        tuple((0, int(i), i) if _is_numeric(i) else (1, 0, i) for i in build.split(".")),
    )


class _Ordered:
    """Total ordering across version kinds: semantic, then calendar, then partial."""

    _RANK = 0

    def _key(self) -> tuple:
        raise NotImplementedError

    def _cmp_key(self) -> tuple:
        return (self._RANK, self._key())

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, _Ordered):
            return NotImplemented
        return self._cmp_key() < other._cmp_key()

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, _Ordered):
            return NotImplemented
        return self._cmp_key() <= other._cmp_key()

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, _Ordered):
            return NotImplemented
        return self._cmp_key() > other._cmp_key()

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, _Ordered):
            return NotImplemented
        return self._cmp_key() >= other._cmp_key()


def _parse_semver(text: str) -> tuple[int, int, int, str, str]:
    match = _SEMVER_RE.fullmatch(text)
    if match is None:
        raise VersionError(f"invalid semantic version: {text!r}")
    major, minor, patch = (int(match.group(i)) for i in (1, 2, 3))
    if max(major, minor, patch) > _U64_MAX:
        raise VersionError(f"version number out of range: {text!r}")
    pre = match.group(4) or ""
    build = match.group(5) or ""
    if pre:
        for ident in pre.split("."):
            if _is_numeric(ident) and len(ident) > 1 and ident.startswith("0"):
                raise VersionError(f"leading zero in pre-release identifier: {text!r}")
    return major, minor, patch, pre, build


@dataclass(frozen=True)
class _Version(_Ordered):
    major: int
    minor: int
    patch: int
    pre: str = ""
    build: str = ""

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, _pre_key(self.pre), _build_key(self.build))


class SemVer(_Version):
    """A strict semantic version, ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``."""

    _RANK = 0

    @classmethod
    def parse(cls, text: str) -> SemVer:
        return cls(*_parse_semver(text))

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            out += f"-{self.pre}"
        if self.build:
            out += f"+{self.build}"
        return out


class CalVer(_Version):
    """A calendar version such as ``2024-03-15``; year, month and day map to major, minor, patch."""

    _RANK = 1

    @classmethod
    def parse(cls, text: str) -> CalVer:
        match = _CALVER_RE.fullmatch(text)
        if match is None:
            raise CalVerError(text)

        year = match["year"].lstrip("0")
        if len(year) < 4:
            year = f"20{year}"
        month = match["month"].lstrip("0")
        day = match["day"].lstrip("0") if match["day"] else "0"

        version = f"{year}.{month}.{day}"
        if match["pre"]:
            version += match["pre"]
        if match["micro"]:
            version += f"+{match['micro']}"

        try:
            return cls(*_parse_semver(version))
        except VersionError:
            raise CalVerError(text) from None

    def __str__(self) -> str:
        out = f"{self.major:04d}-{self.minor:02d}"
        if self.patch > 0:
            out += f"-{self.patch:02d}"
        if self.build:
            out += f".{self.build}"
        if self.pre:
            out += f"-{self.pre}"
        return out


def _opt_key(value: str | None) -> tuple[int, str]:
    return (0, "") if value is None else (1, value)


@dataclass(frozen=True)
class Partial(_Ordered):
    """A loosely structured version whose parts are kept as text."""

    major: str | None = None
    minor: str | None = None
    patch: str | None = None
    other: str | None = None
    pre_release: str | None = None
    build_metadata: str | None = None
    lts: bool = False

    _RANK = 2

    def _key(self) -> tuple:
        return (
            _opt_key(self.major),
            _opt_key(self.minor),
            _opt_key(self.patch),
            _opt_key(self.other),
            _opt_key(self.pre_release),
            _opt_key(self.build_metadata),
            self.lts,
        )

    @classmethod
    def parse(cls, text: str) -> Partial:
        value = text.rstrip()
        lts = value.endswith("lts")
        while value.endswith("lts"):
            value = value[:-3]

        core, sep, build_part = value.partition("+")
        build = build_part if sep else None

        core, sep, pre_part = core.partition("-")
        pre = pre_part if sep else None

        match = _PARTIAL_RE.fullmatch(core)
        if match is None:
            raise PartialError(value)

        major, minor, patch, other = match.groups()
        return cls(
            major=major,
            minor=minor,
            patch=patch,
            other=other,
            pre_release=pre,
            build_metadata=build,
            lts=lts,
        )

    def __str__(self) -> str:
        out = "".join(f"{part}." for part in (self.major, self.minor, self.patch) if part is not None)
        if self.other is not None:
            out += f"-{self.other}"
        if self.pre_release is not None:
            out += f"-{self.pre_release}"
        if self.build_metadata is not None:
            out += f"+{self.build_metadata}"
        if self.lts:
            out += " lts"
        return out


VersionKind = SemVer | CalVer | Partial


def parse_version(text: str) -> VersionKind:
    """Parse a version, trying calendar, then semantic, then partial form."""
    try:
        return CalVer.parse(text)
    except CalVerError:
        pass
    try:
        return SemVer.parse(text)
    except VersionError:
        pass
    return Partial.parse(text)