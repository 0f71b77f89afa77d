"""Flag configuration: per-command flag resolution across backends."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class FlagError(ValueError):
    """Raised when a flag configuration is invalid."""


@dataclass(frozen=True)
class FlagName:
    """A flag with its alternative spellings, written ``--force|-f``."""

    names: tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> FlagName:
        return cls(tuple(word.lstrip("-") for word in text.split("|")))


class UndefinedPolicy(Enum):
    """What to do with a flag the configuration does not define."""

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return name.capitalize()

    IGNORE = auto()
    PASS = auto()
    ERROR = auto()


class ConflictPolicy(Enum):
    INHERIT = "Inherit"
    OVERRIDE = "Override"


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise FlagError(f"{what}: expected a table")
    return data


def _required(data: Mapping[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise FlagError(f"{what}: missing field {key!r}")
    return data[key]


def _opt_str(data: Mapping[str, Any], key: str, what: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise FlagError(f"{what}: {key!r} must be a string")
    return value


def _opt_str_list(data: Mapping[str, Any], key: str, what: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise FlagError(f"{what}: {key!r} must be a list of strings")
    return list(value)


def _enum(kind: type[Enum], data: Mapping[str, Any], key: str, default: Enum) -> Any:
    if key not in data:
        return default
    try:
        return kind(data[key])
    except ValueError:
        raise FlagError(f"unknown variant {data[key]!r} for {key!r}") from None


@dataclass
class FlagPolicy:
    undefined: UndefinedPolicy = UndefinedPolicy.IGNORE
    bk_default: ConflictPolicy = ConflictPolicy.OVERRIDE
    global_default: ConflictPolicy = ConflictPolicy.INHERIT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlagPolicy:
        data = _mapping(data, "policy")
        return cls(
            undefined=_enum(UndefinedPolicy, data, "undefined-policy", UndefinedPolicy.IGNORE),
            bk_default=_enum(ConflictPolicy, data, "default-policy", ConflictPolicy.OVERRIDE),
            global_default=_enum(
                ConflictPolicy, data, "global-default-policy", ConflictPolicy.INHERIT
            ),
        )


@dataclass
class ArgPat:
    pat: str | None = None
    default: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ArgPat:
        data = _mapping(data, "arg_pat")
        return cls(
            pat=_opt_str(data, "pat", "arg_pat"),
            default=_opt_str_list(data, "default", "arg_pat"),
        )


@dataclass
class FlagValue:
    arg_pat: ArgPat
    pat: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlagValue:
        data = _mapping(data, "flag value")
        return cls(
            arg_pat=ArgPat.from_dict(_required(data, "arg_pat", "flag value")),
            pat=_opt_str_list(data, "pat", "flag value"),
        )


@dataclass
class FlagResolve:
    global_value: FlagValue
    backend: dict[str, FlagValue]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlagResolve:
        data = _mapping(data, "flag")
        backends = _mapping(_required(data, "backend", "flag"), "backend")
        return cls(
            global_value=FlagValue.from_dict(_required(data, "global", "flag")),
            backend={name: FlagValue.from_dict(value) for name, value in backends.items()},
        )


@dataclass
class FlagConfig:
    policy: FlagPolicy = field(default_factory=FlagPolicy)
    cmd_flags: dict[str, dict[FlagName, FlagResolve]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlagConfig:
        data = _mapping(data, "flag config")
        policy = FlagPolicy.from_dict(data["policy"]) if "policy" in data else FlagPolicy()
        commands = _mapping(data.get("flag", {}), "flag")
        cmd_flags = {
            command: {
                FlagName.parse(name): FlagResolve.from_dict(resolve)
                for name, resolve in _mapping(flags, command).items()
            }
            for command, flags in commands.items()
        }
        return cls(policy=policy, cmd_flags=cmd_flags)