"""Batch — the ordered commands of one block plus its timestamp.

INVARIANT: The timestamp is assigned once, when the batch goes from empty
to holding one command, and is only reset by :meth:`Batch.clear`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

Clock = Callable[[], float]


def epoch_seconds(clock: Clock = time.time) -> str:
    """Current wall-clock time as whole epoch seconds in decimal text."""
    return str(int(clock()))


@dataclass
class Batch:
    """Pending block of commands awaiting a flush."""

    commands: list[str] = field(default_factory=list)
    timestamp: str | None = None

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    @property
    def is_ready(self) -> bool:
        """True when the batch has both a timestamp and at least one command."""
        return bool(self.timestamp) and not self.is_empty

    def append(self, command: str, clock: Clock = time.time) -> None:
        """Add *command*, stamping the batch if it was empty."""
        if self.is_empty:
            self.timestamp = epoch_seconds(clock)
        self.commands.append(command)

    def clear(self) -> None:
        self.commands.clear()
        self.timestamp = None
