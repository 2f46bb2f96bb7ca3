"""BlockAccumulator — the static/dynamic block state machine.

Lines are fed one at a time.  At depth 0 (static mode) commands collect
until ``block_size`` is reached.  An open delimiter raises the depth and
flushes whatever static commands were pending; while depth > 0 (dynamic
mode) size limits are off and only the close that returns depth to 0
flushes.  Nested delimiters only move the counter.

INVARIANT: depth never goes below 0.  A stray close raises
:class:`UnbalancedDelimiterError` and leaves the state untouched.

INVARIANT: a batch is cleared only after the logger reports success.
A failed write keeps the batch (and its timestamp) so it merges into the
next flush attempt.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from bulkctl.domain.batch import Batch, Clock
from bulkctl.domain.types import LineKind, Mode, Sentinels

logger = logging.getLogger(__name__)


class BlockLogger(Protocol):
    """Destination for flushed blocks.

    Returns True when the block was written, False otherwise.  Must not
    raise for ordinary I/O failures.
    """

    def write(self, timestamp: str, commands: Sequence[str]) -> bool: ...


class BulkError(Exception):
    """Base class for block-processing errors."""


class UnbalancedDelimiterError(BulkError):
    """A close delimiter without a matching open, or a stream left open.

    Attributes:
        depth: Nesting depth at the moment the error was detected.
        dropped: Number of commands in the still-open dynamic block
            (0 for a stray close).
    """

    def __init__(self, message: str, *, depth: int, dropped: int = 0) -> None:
        super().__init__(message)
        self.depth = depth
        self.dropped = dropped


@dataclass
class FlushStats:
    """Counters for a single accumulator run."""

    blocks: int = 0
    commands: int = 0
    failures: int = 0


class BlockAccumulator:
    """Group commands into static and dynamic blocks and hand them to a logger."""

    def __init__(
        self,
        block_size: int,
        block_logger: BlockLogger,
        *,
        sentinels: Sentinels | None = None,
        clock: Clock = time.time,
    ) -> None:
        if block_size <= 0:
            msg = f"block_size must be a positive integer, got {block_size}"
            raise ValueError(msg)
        self.block_size = block_size
        self.sentinels = sentinels or Sentinels()
        self._block_logger = block_logger
        self._clock = clock
        self._depth = 0
        self._pending = Batch()
        self.stats = FlushStats()

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def mode(self) -> Mode:
        return Mode.DYNAMIC if self._depth > 0 else Mode.STATIC

    @property
    def pending(self) -> list[str]:
        """Snapshot of the commands waiting to be flushed."""
        return list(self._pending.commands)

    @property
    def timestamp(self) -> str | None:
        return self._pending.timestamp

    def accept(self, line: str) -> bool:
        """Process one input line.

        Returns False when *line* is the terminator (the caller should stop
        reading and call :meth:`finalize`), True otherwise.

        Raises:
            UnbalancedDelimiterError: *line* is a close delimiter at depth 0.
        """
        kind = self.sentinels.classify(line)

        if kind is LineKind.TERMINATOR:
            return False

        if kind is LineKind.OPEN:
            self._depth += 1
            if self._depth == 1:
                self._flush()
            return True

        if kind is LineKind.CLOSE:
            if self._depth == 0:
                msg = f"Unmatched {line!r}: no open block to close"
                raise UnbalancedDelimiterError(msg, depth=0)
            self._depth -= 1
            if self._depth == 0:
                self._flush()
            return True

        self._pending.append(line, self._clock)
        if self._depth == 0 and len(self._pending) == self.block_size:
            self._flush()
        return True

    def finalize(self) -> bool:
        """Flush the remaining static commands at end of input.

        Returns True if a block was written.

        Raises:
            UnbalancedDelimiterError: The stream ended inside a dynamic
                block.  Its commands are not flushed.
        """
        if self._depth != 0:
            dropped = len(self._pending)
            msg = (
                f"Input ended inside a dynamic block "
                f"(depth {self._depth}, {dropped} command(s) dropped)"
            )
            raise UnbalancedDelimiterError(msg, depth=self._depth, dropped=dropped)
        if self._pending.is_empty:
            return False
        return self._flush()

    def _flush(self) -> bool:
        """Hand the pending batch to the logger; clear it only on success."""
        if not self._pending.is_ready:
            return False
        assert self._pending.timestamp is not None
        size = len(self._pending)
        if not self._block_logger.write(self._pending.timestamp, list(self._pending.commands)):
            self.stats.failures += 1
            logger.warning(
                "Block write failed; keeping %d command(s) for the next flush", size
            )
            return False
        logger.debug("Flushed block of %d command(s) at depth %d", size, self._depth)
        self.stats.blocks += 1
        self.stats.commands += size
        self._pending.clear()
        return True
