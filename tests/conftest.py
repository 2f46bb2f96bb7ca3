"""Shared pytest fixtures and test helpers for bulkctl tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from bulkctl.config.settings import BulkSettings


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Undo logging setup done by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("bulkctl").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> BulkSettings:
    """Default settings rooted at a temp directory, isolated from env config."""
    monkeypatch.delenv("BULKCTL_CONFIG", raising=False)
    return BulkSettings.from_cli(root=tmp_path)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from a temp directory so log files land there.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test
    classes.
    """
    monkeypatch.delenv("BULKCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class RecordingLogger:
    """Block logger fake that records every write.

    Set ``fail`` to make writes report failure without recording.
    """

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, list[str]]] = []
        self.attempts = 0

    def write(self, timestamp: str, commands: Sequence[str]) -> bool:
        self.attempts += 1
        if self.fail:
            return False
        self.calls.append((timestamp, list(commands)))
        return True

    @property
    def blocks(self) -> list[list[str]]:
        return [commands for _, commands in self.calls]


class FakeClock:
    """Settable wall clock in epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def recorder() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
