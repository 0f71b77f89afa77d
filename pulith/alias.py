"""Command templates: alias commands built from literal text and placeholders."""

from __future__ import annotations

import argparse
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_INDEX_RE = re.compile(r"\+?[0-9]+")


class TemplateError(ValueError):
    """Raised when a command template is malformed or cannot be expanded."""


class InvalidPlaceholderError(TemplateError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid placeholder syntax: {detail}")
        self.detail = detail


class MissingPositionalError(TemplateError):
    def __init__(self, index: int) -> None:
        super().__init__(f"Missing positional argument at index {index}")
        self.index = index


class InvalidFlagError(TemplateError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid flag specification: {detail}")
        self.detail = detail


@dataclass(frozen=True)
class Literal:
    """Text copied into the expanded command as one argument."""

    text: str


@dataclass(frozen=True)
class Positional:
    """A positional argument taken from the command line."""

    index: int


@dataclass(frozen=True)
class Flag:
    """An option taken from the command line, such as ``--force``."""

    name: str
    aliases: tuple[str, ...] = ()
    multiple: bool = False

    @property
    def dest(self) -> str:
        return self.name.lstrip("-")


TemplatePart = Literal | Positional | Flag


def _parse_placeholder(text: str) -> TemplatePart:
    content = text.strip()
    if _INDEX_RE.fullmatch(content):
        return Positional(int(content))

    words = content.split()
    if not words:
        raise InvalidPlaceholderError("Empty flag placeholder")
    first, *rest = words
    if not first.startswith("-"):
        raise InvalidFlagError(f"Invalid flag prefix {first}")

    multiple = "*" in rest
    aliases = tuple(word for word in rest if word != "*")
    return Flag(name=first, aliases=aliases, multiple=multiple)


@dataclass(frozen=True)
class CommandTemplate:
    """A command line with ``{N}`` positional and ``{--flag alias *}`` placeholders."""

    parts: tuple[TemplatePart, ...]

    @classmethod
    def parse(cls, template: str) -> CommandTemplate:
        parts: list[TemplatePart] = []
        literal = ""
        placeholder = ""
        in_placeholder = False

        for char in template:
            if not in_placeholder and char == "{":
                if literal:
                    parts.append(Literal(literal))
                    literal = ""
                in_placeholder = True
            elif in_placeholder and char == "}":
                parts.append(_parse_placeholder(placeholder))
                placeholder = ""
                in_placeholder = False
            elif in_placeholder:
                placeholder += char
            else:
                literal += char

        if literal:
            parts.append(Literal(literal))
        return cls(tuple(parts))

    def build_parser(self, name: str) -> argparse.ArgumentParser:
        """An argument parser accepting the positionals and flags of this template."""
        parser = argparse.ArgumentParser(prog=name, allow_abbrev=False)

        indices = sorted({p.index for p in self.parts if isinstance(p, Positional)})
        for index in indices:
            parser.add_argument(f"pos_{index}", nargs="?")

        seen: set[str] = set()
        for part in self.parts:
            if not isinstance(part, Flag) or part.dest in seen:
                continue
            seen.add(part.dest)
            options = [f"--{part.dest}"]
            for alias in part.aliases:
                if alias.startswith("-") and len(alias) == 2:
                    options.append(alias)
                else:
                    options.append(f"--{alias.lstrip('-')}")
            parser.add_argument(
                *options,
                dest=part.dest,
                action="append" if part.multiple else "store",
            )
        return parser

    def expand(self, namespace: argparse.Namespace | Mapping[str, Any]) -> list[str]:
        """Fill the template with parsed arguments, giving the final argument list."""
        values = namespace if isinstance(namespace, Mapping) else vars(namespace)
        args: list[str] = []

        for part in self.parts:
            match part:
                case Literal(text):
                    args.append(text)
                case Positional(index):
                    value = values.get(f"pos_{index}")
                    if value is None:
                        raise MissingPositionalError(index)
                    args.append(value)
                case Flag():
                    value = values.get(part.dest)
                    if value is None:
                        continue
                    given = list(value) if isinstance(value, (list, tuple)) else [value]
                    if not given:
                        continue
                    if part.multiple:
                        args.append(part.name)
                        args.extend(given)
                    else:
                        args += [part.name, given[-1]]
        return args