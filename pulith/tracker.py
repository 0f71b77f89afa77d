"""Progress reporting for long-running transfers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import IO

from tqdm import tqdm

# Characters from empty to full.
_BAR_CHARS = " ░▒▓█"


class ProgressTracker:
    """A progress bar that counts bytes, or a spinner when the total is unknown."""

    def __init__(self, bar: tqdm, finish_message: str | None = None) -> None:
        self._bar = bar
        self._finish_message = finish_message

    @property
    def count(self) -> int:
        """The amount stepped so far."""
        return self._bar.n

    @property
    def total(self) -> int | None:
        """The expected total, or None for a spinner."""
        return self._bar.total

    def step(self, amount: int) -> ProgressTracker:
        """Advance by ``amount`` and return the tracker for chaining."""
        self._bar.update(amount)
        return self

    def finish(self) -> None:
        """Complete the bar, showing the finish message if one was set."""
        if self._finish_message is not None:
            self._bar.set_postfix_str(self._finish_message, refresh=False)
        self._bar.close()

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finish()


@dataclass(frozen=True)
class ProgressTrackerBuilder:
    """Settings for a progress tracker; each ``with_`` method returns a new builder."""

    length: int | None = None
    prefix: str | None = None
    finish: str | None = None

    def with_len(self, length: int) -> ProgressTrackerBuilder:
        return replace(self, length=length)

    def with_prefix(self, prefix: str) -> ProgressTrackerBuilder:
        return replace(self, prefix=prefix)

    def with_finish(self, finish: str) -> ProgressTrackerBuilder:
        return replace(self, finish=finish)

    def build(self, file: IO[str] | None = None) -> ProgressTracker:
        """Create the tracker, writing to ``file`` (standard error by default)."""
        bar = tqdm(
            total=self.length,
            desc=self.prefix,
            file=file if file is not None else sys.stderr,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            ascii=_BAR_CHARS,
        )
        return ProgressTracker(bar, self.finish)