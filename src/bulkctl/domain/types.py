"""Line classification, accumulation modes, and sentinel tokens.

Three sentinel lines steer the accumulator: an open delimiter starts a
dynamic block, a close delimiter ends it, and a terminator ends the
stream.  Every other line is an opaque command.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, model_validator


class Mode(StrEnum):
    """Batching policy currently in force."""

    STATIC = "static"
    DYNAMIC = "dynamic"


class LineKind(StrEnum):
    """Classification of a single input line."""

    OPEN = "open"
    CLOSE = "close"
    TERMINATOR = "terminator"
    COMMAND = "command"


class Sentinels(BaseModel):
    """Exact-match tokens for the open, close, and end-of-stream lines."""

    model_config = {"frozen": True}

    open: str = "{"
    close: str = "}"
    terminator: str = "EOF"

    @model_validator(mode="after")
    def _check_distinct(self) -> Sentinels:
        tokens = (self.open, self.close, self.terminator)
        if any(not token for token in tokens):
            msg = "Sentinel tokens must be non-empty"
            raise ValueError(msg)
        if len(set(tokens)) != len(tokens):
            msg = f"Sentinel tokens must be distinct, got {tokens!r}"
            raise ValueError(msg)
        return self

    def classify(self, line: str) -> LineKind:
        """Return the kind of *line* using exact string equality."""
        if line == self.open:
            return LineKind.OPEN
        if line == self.close:
            return LineKind.CLOSE
        if line == self.terminator:
            return LineKind.TERMINATOR
        return LineKind.COMMAND
