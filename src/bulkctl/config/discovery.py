"""Locate the ``bulkctl.toml`` that applies to an invocation.

An explicit path (``--config`` or ``BULKCTL_CONFIG``) must exist.
Otherwise the nearest ``bulkctl.toml`` in the current directory or one
of its ancestors is used, if any.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

CONFIG_FILENAME = "bulkctl.toml"
CONFIG_ENV_VAR = "BULKCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``bulkctl.toml`` at or above *start* (default: cwd)."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | Path | None = None, start: Path | None = None) -> Path | None:
    """Config file for this run.

    Raises:
        click.ClickException: *explicit* or ``BULKCTL_CONFIG`` names a
            file that does not exist.
    """
    requested = explicit or os.environ.get(CONFIG_ENV_VAR)
    if not requested:
        return find_config(start)
    path = Path(requested)
    if not path.is_file():
        raise click.ClickException(f"Config file not found: {path}")
    return path
