"""BulkService — feed a line stream through the block accumulator.

Reads lines until the terminator sentinel or end of input, flushes the
static remainder, and reports what was written.

Error policy:
- Input that is not valid UTF-8 stops ingestion.  The pending static
  block is still flushed, then the run fails with ``INVALID_INPUT``.
- Block write failures are warnings.  The block stays pending and merges
  into the next flush.
- A stray close delimiter stops ingestion.  The pending static block is
  still flushed, then the run fails with ``UNBALANCED_DELIMITERS``.
- Input that ends inside a dynamic block fails with
  ``UNBALANCED_DELIMITERS``; the open block's commands are not written.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from bulkctl.domain.accumulator import BlockAccumulator, UnbalancedDelimiterError
from bulkctl.infrastructure.block_log import FileBlockLogger
from bulkctl.services.result import ServiceResult

if TYPE_CHECKING:
    from bulkctl.config.settings import BulkSettings
    from bulkctl.domain.batch import Clock

logger = logging.getLogger(__name__)


def strip_line_ending(line: str) -> str:
    """Drop one trailing ``\\n`` or ``\\r\\n``.  A lone ``\\r`` is kept."""
    if not line.endswith("\n"):
        return line
    return line[:-1].removesuffix("\r")


class BulkService:
    """Run a line stream through a :class:`BlockAccumulator`.

    Args:
        settings: Resolved CLI settings (block size, log dir, sentinels).
        stream: Echo destination for block lines.  None means stdout.
        clock: Wall-clock source for block timestamps.
    """

    def __init__(
        self,
        settings: BulkSettings,
        *,
        stream: IO[str] | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._settings = settings
        self._stream = stream
        self._clock = clock

    def run(
        self,
        lines: Iterable[str],
        *,
        block_size: int | None = None,
        log_dir: Path | None = None,
        tag: str | None = None,
    ) -> ServiceResult:
        """Batch *lines* into blocks and write each one out.

        Explicit arguments override the corresponding settings.
        """
        size = block_size if block_size is not None else self._settings.block.size
        if size is None:
            return _config_error("Block size is required (argument or [block] size)")
        if size <= 0:
            return _config_error(f"Block size must be a positive integer, got {size}")

        block_logger = FileBlockLogger(
            log_dir if log_dir is not None else self._settings.log_dir,
            tag=tag or self._settings.block.tag,
            stream=self._stream,
        )
        acc = BlockAccumulator(
            size,
            block_logger,
            sentinels=self._settings.sentinels,
            clock=self._clock,
        )

        consumed = 0
        terminated = False
        failure: tuple[str, str, dict[str, Any]] | None = None

        try:
            for raw in lines:
                consumed += 1
                if not acc.accept(strip_line_ending(raw)):
                    terminated = True
                    break
        except UnbalancedDelimiterError as exc:
            logger.info("Stray close delimiter on line %d", consumed)
            failure = (
                "UNBALANCED_DELIMITERS",
                str(exc),
                {"line": consumed, "depth": exc.depth, "dropped": exc.dropped},
            )
        except UnicodeDecodeError as exc:
            logger.info("Undecodable input after line %d: %s", consumed, exc.reason)
            failure = (
                "INVALID_INPUT",
                f"Input is not valid {exc.encoding} ({exc.reason})",
                {"lines_read": consumed},
            )

        try:
            acc.finalize()
        except UnbalancedDelimiterError as exc:
            logger.info("Input ended with %d unclosed block(s)", exc.depth)
            failure = failure or (
                "UNBALANCED_DELIMITERS",
                str(exc),
                {"line": consumed, "depth": exc.depth, "dropped": exc.dropped},
            )

        warnings: list[str] = []
        if acc.stats.failures:
            warnings.append(
                f"{acc.stats.failures} block write(s) failed; "
                "their commands were kept for the next flush"
            )
        if failure is None and acc.pending:
            warnings.append(f"{len(acc.pending)} command(s) were never written")

        data: dict[str, Any] = {
            "block_size": size,
            "blocks": acc.stats.blocks,
            "commands": acc.stats.commands,
            "lines": consumed,
            "terminated": terminated,
            "files": [str(p) for p in block_logger.written],
        }

        if failure is not None:
            code, message, detail = failure
            return ServiceResult.failure(
                "run", code, message, data=data, warnings=warnings, **detail
            )
        return ServiceResult(ok=True, op="run", data=data, warnings=warnings)


def _config_error(message: str) -> ServiceResult:
    return ServiceResult.failure("run", "INVALID_CONFIG", message)
