"""User profile: templated command aliases and scripts under the pulith root."""

from __future__ import annotations

import argparse
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2


class ProfileError(Exception):
    """Raised when the profile, configuration or data files cannot be used."""


def _str_map(data: Any, what: str) -> dict[str, str]:
    if not isinstance(data, Mapping):
        raise ProfileError(f"{what}: expected a table")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ProfileError(f"{what}: value of {key!r} must be a string")
    return dict(data)


@dataclass
class CmdConfig:
    """Command aliases and the scripts that commands run."""

    aliases: dict[str, str] = field(default_factory=dict)
    script: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CmdConfig:
        if not isinstance(data, Mapping):
            raise ProfileError("command: expected a table")
        if "script" not in data:
            raise ProfileError("command: missing field 'script'")
        rest = {k: v for k, v in data.items() if k != "script"}
        return cls(aliases=_str_map(rest, "command"), script=_str_map(data["script"], "script"))


@dataclass
class Profile:
    command: CmdConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Profile:
        if "command" not in data:
            raise ProfileError("profile: missing field 'command'")
        return cls(command=CmdConfig.from_dict(data["command"]))


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text())
    except OSError as exc:
        raise ProfileError(f"cannot read {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ProfileError(f"invalid TOML in {path}: {exc}") from exc


@dataclass(frozen=True)
class FrameApi:
    """Access to the files under ``<root>/pulith``: config, profile, data and scripts."""

    root: Path

    PROFILE_NAME = "profile"
    CONFIG_NAME = "config"

    @property
    def _base(self) -> Path:
        return Path(self.root) / "pulith"

    def get_config(self) -> dict[str, Any]:
        """The configuration table, empty when no configuration file exists."""
        path = self._base / self.CONFIG_NAME
        if not path.exists():
            return {}
        return _load_toml(path)

    def get_data(self) -> dict[str, Any]:
        """Template variables from the data files, keyed ``.{file}.{key}``."""
        data_dir = self._base / "data"
        try:
            entries = sorted(data_dir.iterdir())
        except OSError as exc:
            raise ProfileError(f"cannot list {data_dir}: {exc}") from exc
        context: dict[str, Any] = {}
        for entry in entries:
            table = _load_toml(entry)
            context.update({f".{entry.name}.{key}": value for key, value in table.items()})
        return context

    def get_profile(self) -> Profile:
        """Render the profile template with the data files and parse it."""
        path = self._base / self.PROFILE_NAME
        try:
            source = path.read_text()
        except OSError as exc:
            raise ProfileError(f"cannot read {path}: {exc}") from exc
        env = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)
        try:
            rendered = env.from_string(source).render(self.get_data())
        except jinja2.TemplateError as exc:
            raise ProfileError(f"cannot render profile: {exc}") from exc
        try:
            data = tomllib.loads(rendered)
        except tomllib.TOMLDecodeError as exc:
            raise ProfileError(f"invalid TOML in profile: {exc}") from exc
        return Profile.from_dict(data)

    def get_cmd_script(self) -> list[tuple[str, str]]:
        """Profile script commands whose script file exists in the script directory."""
        script_dir = self._base / "script"
        try:
            available = {entry.name for entry in script_dir.iterdir()}
        except OSError as exc:
            raise ProfileError(f"cannot list {script_dir}: {exc}") from exc
        scripts = self.get_profile().command.script
        return [(name, script) for name, script in scripts.items() if script in available]

    def script_commands(self) -> list[argparse.ArgumentParser]:
        """One parser per runnable script command."""
        return [
            argparse.ArgumentParser(prog=name, description=f"run script {script}")
            for name, script in self.get_cmd_script()
        ]

    def get_cmd_alias(self) -> list[tuple[str, str]]:
        """The command aliases defined in the profile."""
        return list(self.get_profile().command.aliases.items())