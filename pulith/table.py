"""Plain text tables for listing output."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from tabulate import tabulate


def _as_mapping(row: Any) -> Mapping[str, Any]:
    if isinstance(row, Mapping):
        return row
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        return {f.name: getattr(row, f.name) for f in dataclasses.fields(row)}
    if hasattr(row, "_asdict"):
        return row._asdict()
    raise TypeError(f"cannot tabulate row of type {type(row).__name__}")


@dataclass
class Formatter:
    """Table layout: an optional header and footer line, and column-name removal.

    With ``col_name`` set the first line of the table is removed; when a header
    is present that first line is the header itself.
    """

    header: str | None = None
    footer: str | None = None
    col_name: bool = False

    def build(self, rows: Iterable[Any]) -> str:
        """Render dataclass instances, named tuples or mappings as a borderless table."""
        records = [_as_mapping(row) for row in rows]
        columns = list(records[0].keys()) if records else []
        body = tabulate(
            [[record.get(col, "") for col in columns] for record in records],
            headers=columns,
            tablefmt="plain",
            disable_numparse=True,
        )
        lines = body.splitlines()
        if self.header is not None:
            lines.insert(0, self.header)
        if self.footer is not None:
            lines.append(self.footer)
        if self.col_name and lines:
            del lines[0]
        return "\n".join(lines)